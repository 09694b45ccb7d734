"""
Pytest configuration and shared fixtures.
"""

import sys
from pathlib import Path

import pytest
from faker import Faker

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from core.timelog import TimeLog, local_time  # noqa: E402
from models.events import Event, Period  # noqa: E402

SAMPLE_CODES = ["Admin", "Project", "Project:Sub", "Project:Sub:Deep", "Project:Other", "Personal"]


@pytest.fixture
def sample_text():
    """A small time log in file form, with comments and blank lines."""
    return (
        "# Week of July 3rd\n"
        "\n"
        "2023/07/06 09:36AM [Project:Sub] Did a thing.\n"
        "   2023/07/06 12:00PM [      Admin] Lunch and email\n"
        "2023/07/06 01:00PM [Project:Other]   Review  \n"
        "2023/07/06 05:36PM [Project:Sub] \n"
    )


@pytest.fixture
def codes():
    return list(SAMPLE_CODES)


@pytest.fixture
def period_factory():
    """Build a period from (day, begin hour, end hour, code) on July 2023."""

    def make(day: int, begin: int, end: int, code: str, desc: str = "") -> Period:
        return Period(
            begin=local_time(2023, 7, day, begin),
            end=local_time(2023, 7, day, end),
            code=code,
            desc=desc,
        )

    return make


@pytest.fixture
def generated_events():
    """Random events with codes and descriptions that survive a round trip."""
    fake = Faker()
    Faker.seed(4321)

    events = TimeLog()
    for i in range(40):
        at = local_time(2023, 1 + i // 28, 1 + i % 28, fake.random_int(0, 23), fake.random_int(0, 59))
        code = ":".join(fake.words(nb=fake.random_int(0, 3))).replace("]", "")
        desc = fake.sentence().replace("]", "")
        events.append(Event(at=at, code=code, desc=desc))
    return events

from types import SimpleNamespace

import pytest

from labs.directory import Lab


@pytest.fixture
def sample_labs():
    """Five labs with known labels (see comments for the expected sets)."""
    return [
        # majors: Computer Science, Mechanical Engineering
        # focus:  Artificial Intelligence, Robotics   departments: Science
        Lab.build(
            1,
            name="Autonomous Systems Lab",
            department="Computer Science",
            professor="Dr. Alan Park",
            contact="apark@ucsc.edu",
            description="Our lab uses machine learning and neural networks for robotics automation.",
            application_link="https://example.edu/apply/asl",
        ),
        # majors: Marine Biology
        # focus:  Climate & Environment, Marine Science   departments: Science
        Lab.build(
            2,
            name="Marine Biology Research Lab",
            department="Ocean Sciences",
            professor="Dr. Emily Carter",
            contact="marinebioresearch@gmail.com",
            description=(
                "The Marine Biology Research Lab studies marine ecosystems, coral reef "
                "restoration and the impact of climate change on ocean life."
            ),
        ),
        # majors: Physics   focus: Quantum   departments: (none)
        Lab.build(
            3,
            name="Quantum Optics Lab",
            department="Physics",
            professor="Dr. Sandra Kim",
            contact="skim@ucsc.edu",
            description="Experimental quantum optics and photonics with lasers.",
        ),
        # majors: Psychology, Mechanical Engineering
        # focus:  Robotics, Neuroscience
        # departments: Social Sciences, Science, Engineering
        Lab.build(
            4,
            name="Cognitive Robotics Lab",
            department="Social Sciences",
            professor="Dr. Micheal Lee",
            contact="mlee@ucsc.edu",
            description=(
                "We study human perception and cognitive behavior using social robots "
                "and mechanical engineering prototypes."
            ),
        ),
        # majors: Mechanical Engineering   focus: Robotics   departments: Engineering
        Lab.build(
            5,
            name="Soft Robotics Lab",
            department="Mechanical Engineering",
            description="Soft robotics and manufacturing of compliant actuators.",
        ),
    ]


class FakeOpenAI:
    """Stands in for openai.OpenAI; replies are returned in order."""

    def __init__(self, replies):
        self.replies = list(replies)
        self.calls = []
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))

    def _create(self, **kwargs):
        self.calls.append(kwargs)
        content = self.replies.pop(0)
        message = SimpleNamespace(content=content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


@pytest.fixture
def fake_openai():
    return FakeOpenAI

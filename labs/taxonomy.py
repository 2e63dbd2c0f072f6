"""
Static keyword taxonomies used to label labs.

Three taxonomies, each an ordered mapping label → keywords:
    MAJORS       — student majors, scored, uses the lab's department string
    FOCUS_AREAS  — research focus, plain keyword membership
    DEPARTMENTS  — broad divisions, scored, uses the lab's department string

Keywords are matched as case-insensitive substrings of the lab description.
Short keywords that occur inside ordinary words ("art", "ai", "rna") are
left out.

Public API:
    Taxonomy(name, keywords, scored, uses_subject)
    MAJORS, FOCUS_AREAS, DEPARTMENTS
"""

from pydantic import BaseModel, ConfigDict

EXACT_SUBJECT_WEIGHT   = 5
PARTIAL_SUBJECT_WEIGHT = 3
KEYWORD_CAP            = 5
SCORE_THRESHOLD        = 2


class Taxonomy(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    keywords: dict[str, tuple[str, ...]]
    scored: bool = True
    uses_subject: bool = True

    @property
    def labels(self) -> list[str]:
        return list(self.keywords)


MAJORS = Taxonomy(
    name="majors",
    keywords={
        "Computer Science": (
            "computer science", "machine learning", "artificial intelligence",
            "neural network", "algorithm", "software", "programming",
            "data science", "computer vision", "natural language processing",
            "deep learning", "computing",
        ),
        "Computer Engineering": (
            "computer engineering", "hardware", "embedded", "vlsi", "fpga",
            "microprocessor", "robotics",
        ),
        "Electrical Engineering": (
            "electrical", "signal processing", "circuit", "power systems",
            "electronics", "wireless", "photonics",
        ),
        "Mechanical Engineering": (
            "mechanical", "robotics", "robot", "fluid dynamics",
            "thermodynamics", "manufacturing", "automation", "control systems",
        ),
        "Biomolecular Engineering": (
            "bioengineering", "biomolecular", "genomics", "synthetic biology",
            "protein engineering", "bioinformatics",
        ),
        "Biology": (
            "biology", "cellular", "molecular", "genetics", "ecology",
            "evolution", "organism", "microbiology", "neuroscience",
        ),
        "Marine Biology": (
            "marine", "ocean", "coral", "fish", "coastal", "kelp",
        ),
        "Chemistry": (
            "chemistry", "chemical", "synthesis", "catalysis", "spectroscopy",
            "molecule",
        ),
        "Physics": (
            "physics", "quantum", "particle", "astrophysics", "optics",
            "condensed matter",
        ),
        "Mathematics": (
            "mathematics", "mathematical", "statistics", "topology", "algebra",
            "probability",
        ),
        "Earth Sciences": (
            "geology", "earth science", "climate", "seismic", "volcano",
            "geophysics",
        ),
        "Environmental Studies": (
            "environmental", "sustainability", "conservation",
            "climate change", "agroecology",
        ),
        "Psychology": (
            "psychology", "cognitive", "behavior", "perception",
            "mental health", "developmental",
        ),
        "Linguistics": (
            "linguistics", "language", "phonology", "syntax", "semantics",
        ),
        "Economics": (
            "economics", "economic", "market", "finance", "policy",
        ),
        "Sociology": (
            "sociology", "social", "community", "inequality",
        ),
    },
)


FOCUS_AREAS = Taxonomy(
    name="focus",
    scored=False,
    uses_subject=False,
    keywords={
        "Artificial Intelligence": (
            "artificial intelligence", "machine learning", "deep learning",
            "neural network", "natural language processing",
            "computer vision", "reinforcement learning",
        ),
        "Robotics": (
            "robotics", "robot", "autonomous", "automation", "drone",
        ),
        "Data Science": (
            "data science", "data analysis", "big data", "statistics",
            "visualization", "data mining",
        ),
        "Climate & Environment": (
            "climate", "environment", "sustainability", "carbon", "ecosystem",
        ),
        "Marine Science": (
            "marine", "ocean", "coral", "coastal", "kelp", "fisheries",
        ),
        "Health & Medicine": (
            "health", "medical", "disease", "clinical", "cancer", "drug",
        ),
        "Genomics": (
            "genomics", "genome", "genetic sequencing", "gene expression",
        ),
        "Neuroscience": (
            "neuroscience", "brain", "neuron", "cognitive",
        ),
        "Quantum": (
            "quantum",
        ),
        "Energy": (
            "energy", "solar", "battery", "renewable",
        ),
        "Materials": (
            "materials", "nanotechnology", "polymer", "semiconductor",
        ),
        "Human-Computer Interaction": (
            "human-computer interaction", "user experience",
            "interface design", "accessibility", "virtual reality",
        ),
        "Education": (
            "education", "teaching", "learning sciences", "pedagogy",
            "curriculum",
        ),
        "Social Justice": (
            "equity", "justice", "inequality", "community", "diversity",
        ),
    },
)


DEPARTMENTS = Taxonomy(
    name="departments",
    keywords={
        "Engineering": (
            "engineering", "robotics", "hardware", "circuit", "mechanical",
            "electrical",
        ),
        "Science": (
            "science", "biology", "chemistry", "physics", "experiment",
        ),
        "Humanities": (
            "history", "literature", "philosophy", "language", "linguistics",
        ),
        "Social Sciences": (
            "psychology", "sociology", "economics", "politics",
            "anthropology", "social", "behavior", "policy",
        ),
        "Arts": (
            "arts", "music", "theater", "film", "digital media", "visual",
        ),
    },
)


ALL_TAXONOMIES = (MAJORS, FOCUS_AREAS, DEPARTMENTS)

"""Static question catalogs for the three assessment sections.

Embedded configuration: these lists are defined at import time and never
mutated. The presentation layer enumerates them; the ledger and scorer look
questions up by id.
"""

from .exceptions import UnknownQuestionIdError, UnknownSectionIdError
from .schema import (
    QuestionDefinition,
    QuestionKind,
    SectionDefinition,
    SectionId,
    WiscarDimension,
)


def _rating(question_id: str, prompt: str, category: str, dimension: str | None = None) -> QuestionDefinition:
    return QuestionDefinition(
        id=question_id,
        kind=QuestionKind.SCALED_RATING,
        prompt=prompt,
        category=category,
        dimension=dimension,
    )


def _choice(
    question_id: str,
    prompt: str,
    category: str,
    options: list[str],
    correct: str | None = None,
) -> QuestionDefinition:
    return QuestionDefinition(
        id=question_id,
        kind=QuestionKind.SINGLE_CHOICE,
        prompt=prompt,
        category=category,
        options=tuple(options),
        correct_option=correct,
    )


# =============================================================================
# Psychometric
# =============================================================================

PSYCHOMETRIC_QUESTIONS: tuple[QuestionDefinition, ...] = (
    _rating(
        "interest_1",
        "I enjoy designing systems that solve real-world problems using data.",
        "Interest Scale",
    ),
    _rating(
        "interest_2",
        "I find pattern recognition and data analysis fascinating.",
        "Interest Scale",
    ),
    _rating(
        "personality_1",
        "I am comfortable working with uncertainty and ambiguous problems.",
        "Personality",
    ),
    _rating(
        "personality_2",
        "I enjoy learning new technologies and staying updated with latest trends.",
        "Personality",
    ),
    _choice(
        "motivation_1",
        "What primarily motivates you in your career?",
        "Motivation",
        [
            "Solving challenging technical problems",
            "High salary and job security",
            "Making a positive impact on society",
            "Being recognized as an expert",
        ],
    ),
    _choice(
        "cognitive_1",
        "When approaching a complex problem, you prefer to:",
        "Cognitive Style",
        [
            "Break it down into smaller, logical steps",
            "Explore creative and unconventional solutions",
            "Research similar problems and their solutions",
            "Collaborate with others to find the best approach",
        ],
    ),
)


# =============================================================================
# Technical (knowledge checks)
# =============================================================================

TECHNICAL_QUESTIONS: tuple[QuestionDefinition, ...] = (
    _choice(
        "logic_1",
        "What comes next in the sequence: 2, 4, 8, 16, ?",
        "Logic & Problem Solving",
        ["24", "32", "30", "20"],
        correct="32",
    ),
    _choice(
        "math_1",
        "In linear algebra, what does matrix multiplication represent?",
        "Mathematical Foundation",
        [
            "Element-wise multiplication of corresponding entries",
            "Linear transformation composition",
            "Addition of matrix dimensions",
            "Finding matrix determinant",
        ],
        correct="Linear transformation composition",
    ),
    _choice(
        "programming_1",
        "Which Python data structure would be most efficient for checking if an item exists?",
        "Programming Basics",
        ["List", "Tuple", "Set", "Dictionary keys"],
        correct="Set",
    ),
    _choice(
        "ml_1",
        "What is overfitting in machine learning?",
        "ML Concepts",
        [
            "When a model performs well on training data but poorly on new data",
            "When a model has too few parameters",
            "When training takes too long",
            "When the dataset is too small",
        ],
        correct="When a model performs well on training data but poorly on new data",
    ),
    _choice(
        "ml_2",
        "Which library is primarily used for deep learning in Python?",
        "ML Tools",
        ["Pandas", "NumPy", "TensorFlow", "Matplotlib"],
        correct="TensorFlow",
    ),
    _choice(
        "scenario_1",
        "You need to predict house prices based on features like size, location, "
        "and age. Which approach would you choose?",
        "Practical Application",
        [
            "Linear Regression",
            "K-Means Clustering",
            "Decision Tree Classification",
            "Principal Component Analysis",
        ],
        correct="Linear Regression",
    ),
)


# =============================================================================
# WISCAR
# =============================================================================

WISCAR_DIMENSIONS: tuple[WiscarDimension, ...] = (
    WiscarDimension(
        id="will",
        title="Will (Persistence & Grit)",
        description="Your ability to maintain effort and interest despite challenges",
    ),
    WiscarDimension(
        id="interest",
        title="Interest (Passion for AI/ML)",
        description="Your genuine enthusiasm for machine learning and AI",
    ),
    WiscarDimension(
        id="skill",
        title="Skill (Current Technical Ability)",
        description="Your baseline programming and ML knowledge",
    ),
    WiscarDimension(
        id="cognitive",
        title="Cognitive Readiness (Analytical Thinking)",
        description="Your problem-solving and analytical mindset",
    ),
    WiscarDimension(
        id="ability_to_learn",
        title="Ability to Learn (Growth Mindset)",
        description="Your openness to learning new concepts and skills",
    ),
    WiscarDimension(
        id="real_world",
        title="Real-World Alignment (Job Understanding)",
        description="Your understanding of ML engineering career demands",
    ),
)

_WISCAR_PROMPTS: dict[str, tuple[str, str, str]] = {
    "will": (
        "I finish whatever I begin, even when it gets difficult",
        "I have overcome setbacks to conquer important challenges",
        "I am diligent and work hard consistently",
    ),
    "interest": (
        "I actively seek out information about AI and machine learning",
        "I enjoy discussing AI/ML concepts with others",
        "I find the potential of AI exciting and motivating",
    ),
    "skill": (
        "I am comfortable writing and debugging Python code",
        "I understand basic statistics and probability concepts",
        "I can work with data using tools like Excel or programming languages",
    ),
    "cognitive": (
        "I enjoy breaking down complex problems into smaller parts",
        "I can think logically and reason through abstract concepts",
        "I am comfortable with mathematical and statistical thinking",
    ),
    "ability_to_learn": (
        "I believe my abilities can be developed through dedication and hard work",
        "I see failures and challenges as opportunities to grow",
        "I enjoy learning new technologies and concepts",
    ),
    "real_world": (
        "I understand that ML engineering involves both coding and data analysis",
        "I am prepared for continuous learning throughout my career",
        "I can work effectively in team environments on technical projects",
    ),
}

# Item ids are "<dimension>_<index>", index starting at 0
WISCAR_QUESTIONS: tuple[QuestionDefinition, ...] = tuple(
    _rating(f"{dimension.id}_{index}", prompt, dimension.title, dimension=dimension.id)
    for dimension in WISCAR_DIMENSIONS
    for index, prompt in enumerate(_WISCAR_PROMPTS[dimension.id])
)


# =============================================================================
# Sections
# =============================================================================

SECTION_DEFINITIONS: tuple[SectionDefinition, ...] = (
    SectionDefinition(
        id=SectionId.PSYCHOMETRIC,
        title="Psychometric Evaluation",
        description="Evaluate your psychological and personality readiness",
        questions=PSYCHOMETRIC_QUESTIONS,
    ),
    SectionDefinition(
        id=SectionId.TECHNICAL,
        title="Technical & Aptitude Readiness",
        description="Assess your foundational capabilities and domain knowledge",
        questions=TECHNICAL_QUESTIONS,
    ),
    SectionDefinition(
        id=SectionId.WISCAR,
        title="WISCAR Framework",
        description="Holistic model measuring career fit & learning potential",
        questions=WISCAR_QUESTIONS,
    ),
)

_SECTIONS_BY_ID: dict[SectionId, SectionDefinition] = {s.id: s for s in SECTION_DEFINITIONS}


def resolve_section_id(section_id: SectionId | str) -> SectionId:
    """Normalize a section id, raising UnknownSectionIdError if unrecognized."""
    resolved = SectionId.from_string(section_id)
    if resolved is None:
        raise UnknownSectionIdError(str(section_id))
    return resolved


def get_section_definition(section_id: SectionId | str) -> SectionDefinition:
    """Get display metadata and catalog for a section."""
    return _SECTIONS_BY_ID[resolve_section_id(section_id)]


def get_catalog(section_id: SectionId | str) -> tuple[QuestionDefinition, ...]:
    """Get the ordered question catalog for a section."""
    return get_section_definition(section_id).questions


def get_question(section_id: SectionId | str, question_id: str) -> QuestionDefinition:
    """Look up a question within a section's catalog."""
    for question in get_catalog(section_id):
        if question.id == question_id:
            return question
    raise UnknownQuestionIdError(resolve_section_id(section_id).value, question_id)

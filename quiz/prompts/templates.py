"""Quiz Templates - Prompts para geracao de questoes e imagem."""

# =============================================================================
# SYSTEM PROMPT
# =============================================================================

QUIZ_SYSTEM_PROMPT = (
    "You are an expert quiz generator. Generate educational and engaging quiz questions. "
    "Respond ONLY with valid JSON, no additional text."
)

# =============================================================================
# PROMPT TEMPLATES
# =============================================================================

QUIZ_GENERATION_PROMPT = """Generate a {difficulty} difficulty quiz about {topic} with {num_questions} questions.
Random seed for variety: {seed}

For each question, provide:
1. The question text
2. Four multiple choice options
3. The correct answer (copied exactly from one of the options)
4. A brief explanation of why the answer is correct

Format the response as a JSON object with the following structure:
{{
    "title": "string",
    "description": "string",
    "questions": [
        {{
            "id": number,
            "text": "string",
            "options": ["string", "string", "string", "string"],
            "correctAnswer": "string",
            "explanation": "string"
        }}
    ]
}}

Ensure the questions are challenging but fair, and the explanations are clear and educational."""


IMAGE_PROMPT = (
    "Create a simple and realistic illustration about {topic}, designed for educational use "
    "in a quiz. The image should be clean and minimal, with a light, friendly color palette. "
    "Avoid any text or words or letters, you should not try to generate any fake letters "
    "either, stick to objects only. Focus on clarity, simplicity, and fast rendering."
)


def build_quiz_prompt(topic: str, difficulty: str, num_questions: int, seed: int) -> str:
    """Monta o prompt de geracao do quiz."""
    return QUIZ_GENERATION_PROMPT.format(
        topic=topic,
        difficulty=difficulty,
        num_questions=num_questions,
        seed=seed,
    )


def build_image_prompt(topic: str) -> str:
    """Monta o prompt da ilustracao."""
    return IMAGE_PROMPT.format(topic=topic)

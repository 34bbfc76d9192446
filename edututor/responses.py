# responses.py
"""
Rule-based tutoring replies.

A reply is either the external generator's text, lightly reshaped so it reads
like a lesson, or a canned paragraph chosen by topic and by a keyword inside
that topic. Whatever happens upstream, ``generate`` returns a reply.
"""
import logging
import re
from dataclasses import dataclass, field
from typing import Callable, List, Literal, Optional

from edututor.topics import Topic

logger = logging.getLogger(__name__)

LearningLevel = Literal["beginner", "intermediate", "advanced"]
PreferredStyle = Literal["explanatory", "examples", "practice"]


@dataclass
class ConversationContext:
    previous_messages: List[str] = field(default_factory=list)
    learning_level: LearningLevel = "beginner"
    preferred_style: PreferredStyle = "explanatory"


@dataclass
class TutorReply:
    content: str
    topic: Topic
    suggested_topics: List[str]


STYLE_DIRECTIVES = {
    "explanatory": "Provide a clear, step-by-step explanation. ",
    "examples": "Provide a clear explanation with practical examples. ",
    "practice": "Explain the concept and suggest practice exercises. ",
}

PREVIOUS_MESSAGES_IN_PROMPT = 3

ROLE_PREFIX_RE = re.compile(r"^\s*(assistant|ai|tutor):\s*", re.I)
INSTRUCTIONAL_WORDS = ("learn", "understand", "concept", "example")
INSTRUCTIONAL_LEAD = "Let me help you understand this concept. "


def build_prompt(message: str, context: Optional[ConversationContext] = None) -> str:
    context = context or ConversationContext()
    level = context.learning_level or "beginner"
    directive = STYLE_DIRECTIVES.get(context.preferred_style, STYLE_DIRECTIVES["explanatory"])

    prompt = ""
    recent = [m for m in context.previous_messages if m][-PREVIOUS_MESSAGES_IN_PROMPT:]
    if recent:
        prompt += "Earlier in this conversation the student said:\n"
        prompt += "".join(f'- "{m}"\n' for m in recent)
        prompt += "\n"
    prompt += f'You are an expert, patient tutor. A {level} student asks: "{message}"\n\n'
    prompt += directive
    prompt += "Keep your response under 150 words and focus on understanding."
    return prompt


def format_external_response(text: str) -> str:
    formatted = ROLE_PREFIX_RE.sub("", text.strip(), count=1)
    lowered = formatted.lower()
    if not any(w in lowered for w in INSTRUCTIONAL_WORDS):
        formatted = INSTRUCTIONAL_LEAD + formatted
    return formatted


# -----------------------------------------------------------------------------
# Canned responses: (keyword, paragraph) sub-patterns, then a topic overview
# -----------------------------------------------------------------------------
CANNED_RESPONSES = {
    Topic.PYTHON: (
        [
            ("variable",
             "Variables in Python are like labeled boxes that store data. For example: `name = 'Alice'` "
             "stores the text 'Alice' in a variable called 'name'. You can then use `print(name)` to "
             "display it. Variables can hold different types of data like numbers, text, or lists. "
             "What specific aspect of variables would you like to explore?"),
            ("function",
             "Functions are reusable blocks of code that perform specific tasks. Think of them like "
             "recipes - you define the steps once, then use them whenever needed. For example: "
             "`def greet(name): return f'Hello, {name}!'` creates a function that greets someone. "
             "You call it with `greet('Alice')`. Would you like to learn about parameters or return values?"),
            ("loop",
             "Loops let you repeat code multiple times. A `for` loop is like saying 'do this for each "
             "item': `for i in range(5): print(i)` prints numbers 0-4. A `while` loop continues until a "
             "condition is false: `while x < 10: x += 1`. Which type of loop would you like to practice with?"),
        ],
        "Python is a beginner-friendly programming language. It uses simple, readable syntax that's "
        "close to English. You can use it for web development, data analysis, automation, and more. "
        "What specific Python concept would you like to learn about - variables, functions, loops, "
        "or data structures?",
    ),
    Topic.WEB: (
        [
            ("html",
             "HTML is the structure of web pages, like the skeleton of a building. Tags like "
             "`<h1>Title</h1>` create headings, `<p>text</p>` creates paragraphs, and `<div>` groups "
             "content. Think of it as marking up your content to tell the browser what each piece is. "
             "Would you like to learn about specific HTML elements or how to create your first webpage?"),
            ("css",
             "CSS styles your HTML, like decorating a room. You can change colors, fonts, layouts, and "
             "more. For example: `h1 { color: blue; font-size: 24px; }` makes all headings blue and "
             "large. CSS selectors target elements, and properties define how they look. Would you like "
             "to learn about selectors, the box model, or layouts?"),
            ("javascript",
             "JavaScript adds interactivity to websites. It can respond to clicks, validate forms, and "
             "change content dynamically. For example: `document.getElementById('myButton').onclick = "
             "function() { alert('Hello!'); }` makes a button show a message when clicked. Would you "
             "like to learn about variables, functions, or DOM manipulation?"),
        ],
        "Web development involves creating websites and web applications. You'll need HTML for "
        "structure, CSS for styling, and JavaScript for interactivity. Modern development also uses "
        "frameworks like React. What aspect interests you most - the basics of HTML/CSS, JavaScript "
        "programming, or modern frameworks?",
    ),
    Topic.DATA_SCIENCE: (
        [
            ("data",
             "Data science is about extracting insights from data. You collect, clean, analyze, and "
             "visualize data to find patterns and make predictions. Python libraries like pandas (for "
             "data manipulation) and matplotlib (for visualization) are essential tools. What type of "
             "data analysis interests you most?"),
        ],
        "Data science combines statistics, programming, and domain knowledge to understand data. "
        "You'll work with datasets, create visualizations, and build predictive models. Python and R "
        "are popular languages for this field. Would you like to start with data basics, statistics, "
        "or programming tools?",
    ),
    Topic.MATH: (
        [
            ("algebra",
             "Algebra is about finding unknown values using equations. Variables (like x) represent "
             "unknown numbers, and you solve for them using mathematical operations. For example: if "
             "2x + 3 = 7, then 2x = 4, so x = 2. It's like solving puzzles with numbers. What algebra "
             "concept would you like to explore?"),
        ],
        "Mathematics is the foundation of logical thinking and problem-solving. Different areas like "
        "algebra, geometry, and statistics each have unique applications. Algebra works with variables "
        "and equations, geometry deals with shapes and space, and statistics analyzes data. Which area "
        "interests you most?",
    ),
}

GENERAL_TEMPLATE = """I'd be happy to help you learn about "{message}". To provide the best explanation, could you tell me:

1. What's your current knowledge level with this topic?
2. Are you looking for a general overview or specific details?
3. Do you prefer explanations with examples or step-by-step instructions?

This will help me tailor my response to your learning style!"""

SUGGESTED_TOPICS = {
    Topic.PYTHON: ["Variables and Data Types", "Functions and Methods", "Loops and Conditionals", "Lists and Dictionaries"],
    Topic.WEB: ["HTML Structure", "CSS Styling", "JavaScript Basics", "Responsive Design"],
    Topic.DATA_SCIENCE: ["Data Analysis", "Data Visualization", "Statistics Basics", "Python for Data Science"],
    Topic.MATH: ["Algebra Basics", "Geometry Fundamentals", "Statistics", "Problem Solving"],
    Topic.GENERAL: ["Study Techniques", "Learning Strategies", "Problem Solving", "Critical Thinking"],
}


def canned_response(message: str, topic: Topic) -> str:
    if topic not in CANNED_RESPONSES:
        # General echoes the question back verbatim
        return GENERAL_TEMPLATE.format(message=message)
    patterns, overview = CANNED_RESPONSES[topic]
    lowered = message.lower()
    for keyword, paragraph in patterns:
        if keyword in lowered:
            return paragraph
    return overview


def suggested_topics(topic: Topic) -> List[str]:
    return list(SUGGESTED_TOPICS.get(topic, SUGGESTED_TOPICS[Topic.GENERAL]))


def generate(
    message: str,
    topic: Topic,
    external_generate: Optional[Callable[[str], str]] = None,
    context: Optional[ConversationContext] = None,
) -> TutorReply:
    # Quiz and stored topics are free text
    topic = Topic.parse(topic)
    if external_generate is not None:
        try:
            text = external_generate(build_prompt(message, context))
            if text and text.strip():
                return TutorReply(
                    content=format_external_response(text),
                    topic=topic,
                    suggested_topics=suggested_topics(topic),
                )
            logger.warning("[LLM] generation degraded: empty reply, using canned response")
        except Exception as e:
            logger.warning("[LLM] generation degraded: %s", e)

    return TutorReply(
        content=canned_response(message, topic),
        topic=topic,
        suggested_topics=suggested_topics(topic),
    )

"""Plain-text export of a generated exam."""

from .models import ExamData, ExamQuestion

EXPORT_FILENAME = "cs-exam-generated.txt"
EXPORT_MIME_TYPE = "text/plain"
QUESTION_DELIMITER = "\n---\n\n"


def _question_block(number: int, q: ExamQuestion) -> str:
    lines = [f"Q{number} [{q.type.value}]: {q.question_text}"]
    if q.options:
        lines.append(f"Options: {', '.join(q.options)}")
    lines.append(f"Answer: {q.correct_answer}")
    lines.append(f"Explanation: {q.explanation}")
    return "\n".join(lines) + "\n"


def exam_to_text(exam: ExamData) -> str:
    header = f"EXAM: {exam.title}\n\n{exam.description}\n\n"
    return header + QUESTION_DELIMITER.join(
        _question_block(i, q) for i, q in enumerate(exam.questions, 1)
    )


def export_bytes(exam: ExamData) -> bytes:
    return exam_to_text(exam).encode("utf-8")

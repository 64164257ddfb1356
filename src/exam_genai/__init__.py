"""ExamGenAI: generate computer-science exams from a topic or study material."""

__version__ = "0.1.0"

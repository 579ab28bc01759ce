"""Errores del motor que se reportan antes de optimizar."""


class SchedulingError(ValueError):
    """Base de los errores de entrada del motor."""


class InvalidRange(SchedulingError):
    """Rango de fechas u horas mal formado o vacío."""


class EmptyInput(SchedulingError):
    """Lista de cursos, secciones o aulas vacía."""

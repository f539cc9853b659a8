from .experience import ExperienceTable, find_floor_index

__all__ = ["ExperienceTable", "find_floor_index"]

# Organization directory (read model for employee placement)
from .organization import Company, Department, Section, Position

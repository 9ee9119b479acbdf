"""
Базовые геометрические классы (Geometric Base).

- GeneralPose3 - позы с масштабированием (поворот + перенос + масштаб)
"""

from .general_pose3 import GeneralPose3

__all__ = [
    'GeneralPose3',
]

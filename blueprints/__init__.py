"""
Blueprints for the BAC Index quiz.

Import all blueprints for easy registration in app_factory.py.
"""

from blueprints.quiz import quiz_bp
from blueprints.api import api_bp

__all__ = [
    'quiz_bp',
    'api_bp',
]

"""
Code generation module for the Rust to TypeScript generator.

This module provides TypeScript code generation from extracted declarations.
"""

from .context import CodeGenerationContext
from .base import BaseGenerator
from .definition import DefinitionGenerator
from .generator import TypeScriptGenerator

__all__ = [
    'CodeGenerationContext',
    'BaseGenerator',
    'DefinitionGenerator',
    'TypeScriptGenerator',
]

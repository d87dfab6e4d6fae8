from .codegen import GeneratedModule, GenerationResult, generate_all, generate_module
from .customization import Customizations, load_customizations
from .model import (GenerationError, InheritanceCycleError, MarshalError, Model,
                    ModuleInfo, MethodInfo)
from .symbols import make_known_symbols

__version__ = "0.1.0"

__all__ = [
    "Customizations",
    "GeneratedModule",
    "GenerationError",
    "GenerationResult",
    "InheritanceCycleError",
    "MarshalError",
    "MethodInfo",
    "Model",
    "ModuleInfo",
    "generate_all",
    "generate_module",
    "load_customizations",
    "make_known_symbols",
]

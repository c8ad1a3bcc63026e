"""firmgen export: ESP-IDF project files from a CompilationUnit.

Public API::

    from firmgen.export import to_main_cpp
    cpp_text = to_main_cpp(unit, configuration)
"""

from .cpp import CppWriter, to_cmake_lists, to_main_cpp, to_sdkconfig

__all__ = ["CppWriter", "to_cmake_lists", "to_main_cpp", "to_sdkconfig"]

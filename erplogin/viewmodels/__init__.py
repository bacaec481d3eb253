"""ViewModel package for UI state and command surfaces.

Call context:
    ``erplogin/web_ui/runtime.py`` and ``erplogin/app/cli.py`` import concrete
    viewmodels from this package to bind view callbacks to state transitions.

Dependencies:
    Modules in this package depend on domain types only. I/O adapters and
    use-case construction remain outside.
"""

# expense_tracker/outputs/__init__.py
from importlib import import_module

from expense_tracker.outputs.base import BaseOutput


def get_output(name, config):
    """Instantiate the exporter registered as *name* in ``output_modules``."""
    modules = config.get('output_modules') or {}
    if name not in modules:
        raise ValueError(f"Unknown output '{name}'; configured: {', '.join(sorted(modules))}")
    module_name, cls_name = modules[name].rsplit('.', 1)
    exporter_cls = getattr(import_module(module_name), cls_name)
    if not issubclass(exporter_cls, BaseOutput):
        raise TypeError(f"{modules[name]} is not a BaseOutput")
    return exporter_cls(config)

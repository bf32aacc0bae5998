# topicsum/__init__.py
import importlib
from typing import Any

__version__ = "1.0.0"

__all__ = [
    "core",
    "corpus",
    "datatypes",
    "exceptions",
    "term_topic_matrix",
    "topic_model",
    "TopicSummarizer",
    "TermTopicMatrix",
    "Document",
    "SummaryResult",
    "SummaryStatus",
    "summarize",
    "summarize_batch",
    "load_config",
    "__version__",
]

# Map attribute -> submodule for lazy loading
_lazy_submodules = {
    "core": "topicsum.core",
    "corpus": "topicsum.corpus",
    "datatypes": "topicsum.datatypes",
    "exceptions": "topicsum.exceptions",
    "term_topic_matrix": "topicsum.term_topic_matrix",
    "topic_model": "topicsum.topic_model",
}

# Map attribute -> (submodule, name) for lazily imported public objects
_lazy_attributes = {
    "TopicSummarizer": ("topicsum.core", "TopicSummarizer"),
    "summarize": ("topicsum.core", "summarize"),
    "summarize_batch": ("topicsum.core", "summarize_batch"),
    "TermTopicMatrix": ("topicsum.term_topic_matrix", "TermTopicMatrix"),
    "Document": ("topicsum.datatypes", "Document"),
    "SummaryResult": ("topicsum.datatypes", "SummaryResult"),
    "SummaryStatus": ("topicsum.datatypes", "SummaryStatus"),
    "load_config": ("topicsum._file_driver", "load_config"),
}

def __getattr__(name: str) -> Any:
    if name in _lazy_submodules:
        module = importlib.import_module(_lazy_submodules[name])
        globals()[name] = module  # cache for future
        return module
    if name in _lazy_attributes:
        module_name, attr = _lazy_attributes[name]
        value = getattr(importlib.import_module(module_name), attr)
        globals()[name] = value
        return value
    raise AttributeError(f"module 'topicsum' has no attribute '{name}'")

def __dir__():
    return sorted(list(globals().keys()) + list(_lazy_submodules.keys()) + list(_lazy_attributes.keys()))

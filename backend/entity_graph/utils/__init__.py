"""
工具函数包
"""
from .naming import humanify_name, humanify_name_remove_namespaces

__all__ = [
    "humanify_name",
    "humanify_name_remove_namespaces",
]

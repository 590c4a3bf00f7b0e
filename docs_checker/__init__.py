"""
Docs-Checker: Markdown 文档语料库的链接与结构一致性检查工具
"""

__version__ = "0.1.0"

"""
CLI Layer - 命令行接口层

提供命令行入口和检查流水线。
"""

from docs_checker.cli.app import app, validate, version, run_validation

__all__ = [
    "app",
    "validate",
    "version",
    "run_validation",
]

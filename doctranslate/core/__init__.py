"""
Core translation logic: retry executor, remote operations and workflow
"""

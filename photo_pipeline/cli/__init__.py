"""
Command-line interface for the Photo Pipeline
"""

"""Command-line interface for wavpeek"""

"""Command-line interface for weft.

Usage:
    weft plan mypkg.pipelines:report
    weft run mypkg.pipelines:report --input '{"user_id": 7}'
    weft run ./pipeline.py:report --sequential --artifacts
"""

"""
Pytest configuration file.

Puts the project root on the Python path so that the flat `services`,
`routers` and `models` packages import the same way they do under uvicorn.
"""
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.dirname(__file__)))

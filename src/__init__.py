"""
Initializes the 'src' directory as a Python package.

This allows the 'nwminimap' application package to be imported as
'src.nwminimap' by the scripts in the project root, such as 'main.py', and
by the test suite.
"""

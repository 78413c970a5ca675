"""Command-line tools run by the demo plugins.

    - generate_resource: Turns .in files into processed .out resources
    - echo_into: Writes a string into a file
    - generate_sources: Turns input files into generated source files
"""

"""Built-in demo plugins.

Each module defines a ``Plugin`` class exercising one kind of executable:
    - command_demo: A command found on the search path
    - executable_file_demo: An executable file shipped with the package
    - local_target_demo: An executable target of the package
    - script_demo: A script compiled on the fly
    - toolchain_command_demo: A tool of the build toolchain
    - manifest: Commands declared in a manifest file
"""

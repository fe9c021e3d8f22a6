"""
classfile_ranker — rank JVM methods by bytecode size across a JAR archive.

Decodes each compiled class file inside the archive, extracts per-method
name, descriptor and Code-attribute length, and merges everything into a
single list ordered by bytecode size.
"""

__version__ = "0.1.0"
RANKER_VERSION = "v0"
PACKAGE_NAME = "classfile_ranker"
SCHEMA_VERSION = "0.1"

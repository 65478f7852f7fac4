"""Makefile synthesis."""

from nofile.makefile.synthesizer import ExecutableDescriptor, Makefile, render_makefile

__all__ = ["ExecutableDescriptor", "Makefile", "render_makefile"]

"""
Profile — support-profile descriptor and tunable parameters.

The profile holds every knob so that core decoding contains no opinions.
Changing which archive entries are scanned or how many methods are shown
by default is a profile change, not a code change.
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class Profile:
    """Describes which entries the ranker scans and how it reports them."""

    # Identity
    profile_id: str

    # Archive entry filter
    class_suffix: str = ".class"

    # Attribute holding a method's instruction stream (JVMS §4.7.3)
    code_attribute_name: str = "Code"

    # Reporting
    default_top_n: int = 10

    def matches(self, path: str, is_directory: bool) -> bool:
        """True when an archive entry should be decoded."""
        return not is_directory and path.endswith(self.class_suffix)

    @classmethod
    def v0(cls) -> "Profile":
        """The locked v0 profile: jar-classfile-code-length."""
        return cls(profile_id="jar-classfile-code-length")

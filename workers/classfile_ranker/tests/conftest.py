"""
Shared pytest fixtures for classfile_ranker tests.

Two sources of class files:
  - ClassBuilder assembles class files byte-for-byte in memory, so every
    structural edge case (double-slot constants, vendor attributes,
    corrupt lengths) can be produced without a JDK.
  - javac-compiled fixtures give real toolchain output.  They are skipped
    automatically when javac is not on PATH.
"""
import io
import shutil
import struct
import subprocess
import textwrap
import zipfile
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import pytest

# ── In-memory class file builder ─────────────────────────────────────────────

ACC_PUBLIC = 0x0001
ACC_NATIVE = 0x0100
ACC_ABSTRACT = 0x0400

Attribute = Tuple[str, bytes]


def code_body(code: bytes, max_stack: int = 2, max_locals: int = 2,
              nested: Sequence[Tuple[int, bytes]] = ()) -> bytes:
    """Payload of a Code attribute (JVMS §4.7.3), no exception table."""
    out = struct.pack(">HHI", max_stack, max_locals, len(code)) + code
    out += struct.pack(">H", 0)                     # exception_table_length
    out += struct.pack(">H", len(nested))
    for name_index, payload in nested:
        out += struct.pack(">HI", name_index, len(payload)) + payload
    return out


class ClassBuilder:
    """Assemble a class file; indices are handed out as entries are added."""

    def __init__(self, name: str = "fixtures/Sample", major: int = 52, minor: int = 0):
        self.major = major
        self.minor = minor
        self._pool: List[bytes] = []
        self._next = 1
        self._utf8: Dict[str, int] = {}
        self.interfaces: List[int] = []
        self._fields: List[bytes] = []
        self._methods: List[bytes] = []
        self._class_attributes: List[Tuple[int, bytes]] = []
        self.this_class = self.class_ref(name)
        self.super_class = self.class_ref("java/lang/Object")

    # -- constant pool ---------------------------------------------------------

    def raw_constant(self, raw: bytes, slots: int = 1) -> int:
        index = self._next
        self._pool.append(raw)
        self._next += slots
        return index

    def utf8(self, text: str) -> int:
        if text not in self._utf8:
            data = text.encode("utf-8")
            self._utf8[text] = self.raw_constant(
                bytes([1]) + struct.pack(">H", len(data)) + data
            )
        return self._utf8[text]

    def class_ref(self, name: str) -> int:
        return self.raw_constant(bytes([7]) + struct.pack(">H", self.utf8(name)))

    def integer(self, value: int) -> int:
        return self.raw_constant(bytes([3]) + struct.pack(">i", value))

    def long(self, value: int) -> int:
        return self.raw_constant(bytes([5]) + struct.pack(">q", value), slots=2)

    def double(self, value: float) -> int:
        return self.raw_constant(bytes([6]) + struct.pack(">d", value), slots=2)

    def string(self, text: str) -> int:
        return self.raw_constant(bytes([8]) + struct.pack(">H", self.utf8(text)))

    def name_and_type(self, name: str, descriptor: str) -> int:
        return self.raw_constant(
            bytes([12]) + struct.pack(">HH", self.utf8(name), self.utf8(descriptor))
        )

    def method_ref(self, owner: str, name: str, descriptor: str) -> int:
        owner_index = self.class_ref(owner)
        nat = self.name_and_type(name, descriptor)
        return self.raw_constant(bytes([10]) + struct.pack(">HH", owner_index, nat))

    def method_handle(self, kind: int, reference: int) -> int:
        return self.raw_constant(bytes([15]) + struct.pack(">BH", kind, reference))

    def invoke_dynamic(self, bootstrap: int, name: str, descriptor: str) -> int:
        nat = self.name_and_type(name, descriptor)
        return self.raw_constant(bytes([18]) + struct.pack(">HH", bootstrap, nat))

    # -- members ---------------------------------------------------------------

    def _attributes(self, attributes: Iterable[Attribute]) -> List[Tuple[int, bytes]]:
        return [(self.utf8(name), payload) for name, payload in attributes]

    @staticmethod
    def _member(access: int, name_index: int, descriptor_index: int,
                attributes: List[Tuple[int, bytes]]) -> bytes:
        out = struct.pack(">HHHH", access, name_index, descriptor_index, len(attributes))
        for attr_name, payload in attributes:
            out += struct.pack(">HI", attr_name, len(payload)) + payload
        return out

    def add_interface(self, name: str) -> None:
        self.interfaces.append(self.class_ref(name))

    def add_field(self, name: str, descriptor: str,
                  attributes: Iterable[Attribute] = (), access: int = ACC_PUBLIC) -> None:
        self._fields.append(
            self._member(access, self.utf8(name), self.utf8(descriptor),
                         self._attributes(attributes))
        )

    def add_method(self, name: str, descriptor: str, code: Optional[bytes] = None,
                   attributes: Iterable[Attribute] = (), access: int = ACC_PUBLIC) -> None:
        attrs = list(attributes)
        if code is not None:
            attrs.insert(0, ("Code", code_body(code)))
        self._methods.append(
            self._member(access, self.utf8(name), self.utf8(descriptor),
                         self._attributes(attrs))
        )

    def add_method_raw(self, access: int, name_index: int, descriptor_index: int,
                       attributes: Sequence[Tuple[int, bytes]] = ()) -> None:
        """Add a method with explicit (possibly bogus) indices."""
        self._methods.append(
            self._member(access, name_index, descriptor_index, list(attributes))
        )

    def add_class_attribute(self, name: str, payload: bytes) -> None:
        self._class_attributes.append((self.utf8(name), payload))

    # -- output ----------------------------------------------------------------

    def build(self) -> bytes:
        out = bytearray(struct.pack(">IHH", 0xCAFEBABE, self.minor, self.major))
        out += struct.pack(">H", self._next)
        for raw in self._pool:
            out += raw
        out += struct.pack(">HHH", ACC_PUBLIC, self.this_class, self.super_class)
        out += struct.pack(">H", len(self.interfaces))
        for index in self.interfaces:
            out += struct.pack(">H", index)
        out += struct.pack(">H", len(self._fields))
        for f in self._fields:
            out += f
        out += struct.pack(">H", len(self._methods))
        for m in self._methods:
            out += m
        out += struct.pack(">H", len(self._class_attributes))
        for name_index, payload in self._class_attributes:
            out += struct.pack(">HI", name_index, len(payload)) + payload
        return bytes(out)


# aload_0; invokespecial #n; return
INIT_CODE = bytes([0x2A, 0xB7, 0x00, 0x01, 0xB1])
# aload_0; getfield #n; ireturn
GETTER_CODE = bytes([0x2A, 0xB4, 0x00, 0x02, 0xAC])
# aload_0; iload_1; putfield #n; return
SETTER_CODE = bytes([0x2A, 0x1B, 0xB5, 0x00, 0x02, 0xB1])


def simple_class(name: str = "fixtures/SimpleClass") -> bytes:
    """Constructor + getter + setter over one private int field."""
    b = ClassBuilder(name)
    b.method_ref("java/lang/Object", "<init>", "()V")
    b.add_field("value", "I", access=0x0002)
    b.add_method("<init>", "()V", code=INIT_CODE)
    b.add_method("getValue", "()I", code=GETTER_CODE)
    b.add_method("setValue", "(I)V", code=SETTER_CODE)
    b.add_class_attribute("SourceFile", struct.pack(">H", b.utf8("SimpleClass.java")))
    return b.build()


@pytest.fixture
def class_builder():
    """Factory for fresh ClassBuilder instances."""
    return ClassBuilder


@pytest.fixture
def simple_class_bytes() -> bytes:
    return simple_class()


@pytest.fixture
def simple_class_factory():
    """simple_class(name) for tests that need several distinct classes."""
    return simple_class


def make_jar(members: Sequence[Tuple[str, bytes]],
             compression: int = zipfile.ZIP_DEFLATED) -> bytes:
    """Build a ZIP archive in memory; names ending in '/' become directories."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", compression=compression) as zf:
        for name, data in members:
            if name.endswith("/"):
                zf.writestr(zipfile.ZipInfo(name), b"")
            else:
                zf.writestr(name, data)
    return buf.getvalue()


@pytest.fixture
def jar_factory():
    return make_jar


# ── javac-compiled fixtures ──────────────────────────────────────────────────

JAVA_SOURCES = {
    "SimpleClass.java": textwrap.dedent("""\
        package fixtures;

        public class SimpleClass {
            private int value;

            public int getValue() { return value; }

            public void setValue(int value) { this.value = value; }
        }
    """),
    "AbstractMethods.java": textwrap.dedent("""\
        package fixtures;

        public abstract class AbstractMethods {
            public abstract void abstractMethod();

            public native int nativeMethod();

            public int concreteMethod(int x) {
                return x * 2 + 1;
            }
        }
    """),
    "WithLongDouble.java": textwrap.dedent("""\
        package fixtures;

        public class WithLongDouble {
            public long getLongValue() {
                return 9223372036854775807L;
            }

            public double getDoubleValue() {
                return 3.141592653589793;
            }

            public double compute(long a, double b) {
                return a * b + 1.0;
            }
        }
    """),
    "WithInterfaces.java": textwrap.dedent("""\
        package fixtures;

        import java.io.Serializable;

        public class WithInterfaces implements Serializable, Comparable<WithInterfaces> {
            private int id;

            public int compareTo(WithInterfaces other) {
                return Integer.compare(this.id, other.id);
            }
        }
    """),
    "AllPrimitiveTypes.java": textwrap.dedent("""\
        package fixtures;

        public class AllPrimitiveTypes {
            public void voidMethod() {}
            public byte byteMethod() { return 0; }
            public char charMethod() { return 'a'; }
            public short shortMethod() { return 0; }
            public int intMethod() { return 0; }
            public long longMethod() { return 0L; }
            public float floatMethod() { return 0.0f; }
            public double doubleMethod() { return 0.0; }
            public boolean booleanMethod() { return false; }
            public int[] intArrayMethod() { return new int[0]; }
            public String[][] multiDimMethod() { return new String[0][0]; }
        }
    """),
    "LambdasAndIndy.java": textwrap.dedent("""\
        package fixtures;

        import java.util.function.Function;
        import java.util.function.Supplier;

        public class LambdasAndIndy {
            public Supplier<String> getSupplier() {
                return () -> "hello";
            }

            public Function<Integer, Integer> getDoubler() {
                return x -> x * 2;
            }
        }
    """),
    "NestedClasses.java": textwrap.dedent("""\
        package fixtures;

        public class NestedClasses {
            public class Inner {
                public void innerMethod() {}
            }

            public static class StaticNested {
                public void nestedMethod() {}
            }

            public void methodWithAnonymous() {
                Runnable r = new Runnable() {
                    public void run() {
                        System.out.println("anonymous");
                    }
                };
                r.run();
            }
        }
    """),
}


def _javac_available() -> bool:
    """Check if javac is in PATH."""
    return shutil.which("javac") is not None


@pytest.fixture(scope="session")
def javac_ok():
    """Skip tests if javac is not available."""
    if not _javac_available():
        pytest.skip("javac not available - install a JDK to run these tests")


@pytest.fixture(scope="session")
def compiled_classes(tmp_path_factory, javac_ok) -> Path:
    """Session-scoped directory holding javac output for JAVA_SOURCES."""
    src_dir = tmp_path_factory.mktemp("java_src")
    out_dir = tmp_path_factory.mktemp("java_classes")
    paths = []
    for filename, source in JAVA_SOURCES.items():
        path = src_dir / filename
        path.write_text(source)
        paths.append(str(path))

    subprocess.run(
        ["javac", "-d", str(out_dir), *paths],
        check=True,
        capture_output=True,
        timeout=120,
    )
    return out_dir


@pytest.fixture(scope="session")
def load_compiled(compiled_classes):
    """Return the bytes of a compiled class by internal name."""
    def _load(internal_name: str) -> bytes:
        return (compiled_classes / f"{internal_name}.class").read_bytes()
    return _load


@pytest.fixture(scope="session")
def compiled_jar(compiled_classes) -> bytes:
    """All compiled fixture classes packed into one JAR, sorted by path."""
    members = [
        (p.relative_to(compiled_classes).as_posix(), p.read_bytes())
        for p in sorted(compiled_classes.rglob("*.class"))
    ]
    return make_jar(members)

"""
Objax diagnostics
=================
Collects lexical and syntax errors without aborting the pipeline
("keep going" mode): every stage records what it finds and the
pipeline decides afterwards whether to continue.
"""

from dataclasses import dataclass
from enum import Enum, auto


class ErrorSeverity(Enum):
    WARNING = auto()
    ERROR   = auto()


@dataclass(frozen=True)
class Diagnostic:
    """One diagnostic message."""
    severity: ErrorSeverity
    message:  str
    line:     int = -1
    column:   int = -1
    hint:     str = ''

    def __str__(self):
        loc = f"{self.line}:{self.column}" if self.line > 0 else '?:?'
        base = f"[{self.severity.name}] {loc}  {self.message}"
        if self.hint:
            base += f"\n  hint: {self.hint}"
        return base


@dataclass(frozen=True)
class LexError:
    """A run of input characters that matched no token pattern."""
    offset: int
    line:   int
    column: int
    text:   str

    @property
    def message(self) -> str:
        return (f"unexpected character: ->{self.text[0]}<- at offset: {self.offset}, "
                f"skipped {len(self.text)} characters.")

    def to_diagnostic(self) -> Diagnostic:
        return Diagnostic(ErrorSeverity.ERROR, self.message, self.line, self.column)


@dataclass(frozen=True)
class ParseError:
    """
    A token the grammar did not accept.

    Attributes:
        rule:     grammar rule being matched when the error occurred
        expected: terminal names acceptable at that point, sorted
        found:    image of the offending token ('end of input' at EOF)
    """
    rule:     str
    expected: tuple
    found:    str
    line:     int = -1
    column:   int = -1
    offset:   int = -1

    @property
    def message(self) -> str:
        if len(self.expected) == 1:
            wanted = self.expected[0]
        else:
            wanted = 'one of: ' + ', '.join(self.expected)
        return f"Expecting {wanted} but found --> '{self.found}' <-- in rule '{self.rule}'"

    def to_diagnostic(self) -> Diagnostic:
        return Diagnostic(ErrorSeverity.ERROR, self.message, self.line, self.column)


class ObjaxError(Exception):
    """Raised only in fail-fast mode (see DiagnosticBag.raise_if_errors)."""
    def __init__(self, message, diagnostics=()):
        super().__init__(message)
        self.diagnostics = list(diagnostics)


class DiagnosticBag:
    """
    Diagnostic collector.
    Stages add errors/warnings here and the caller inspects or
    reports them once the pipeline has finished.
    """
    def __init__(self):
        self._diags: list[Diagnostic] = []

    # ── adding ───────────────────────────────────────────────────────────────

    def error(self, message: str, line: int = -1, column: int = -1, hint: str = ''):
        self.add(Diagnostic(ErrorSeverity.ERROR, message, line, column, hint))

    def warning(self, message: str, line: int = -1, column: int = -1, hint: str = ''):
        self.add(Diagnostic(ErrorSeverity.WARNING, message, line, column, hint))

    def add(self, diag: Diagnostic):
        self._diags.append(diag)

    def extend(self, errors):
        """Add LexError / ParseError records in order."""
        for err in errors:
            self.add(err.to_diagnostic())

    # ── queries ──────────────────────────────────────────────────────────────

    @property
    def has_errors(self) -> bool:
        return any(d.severity == ErrorSeverity.ERROR for d in self._diags)

    @property
    def count(self) -> int:
        return len(self._diags)

    @property
    def errors(self):
        return [d for d in self._diags if d.severity == ErrorSeverity.ERROR]

    @property
    def warnings(self):
        return [d for d in self._diags if d.severity == ErrorSeverity.WARNING]

    def messages(self) -> list[str]:
        """Error messages in the order they were recorded."""
        return [d.message for d in self.errors]

    def __iter__(self):
        return iter(self._diags)

    def __len__(self):
        return len(self._diags)

    # ── output ───────────────────────────────────────────────────────────────

    def report(self) -> str:
        if not self._diags:
            return "No diagnostics."
        lines = [str(d) for d in sorted(self._diags, key=lambda d: (d.line, d.column))]
        summary = (f"\n{'─'*60}\n"
                   f"{len(self.errors)} error(s), {len(self.warnings)} warning(s)")
        return '\n'.join(lines) + summary

    def raise_if_errors(self):
        if self.has_errors:
            raise ObjaxError(f"{len(self.errors)} error(s) found.\n" +
                             '\n'.join(str(d) for d in self.errors),
                             self.errors)

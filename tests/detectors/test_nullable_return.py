"""Tests for the nullable-return and null-collection-return rules."""

from smell_sentinel.detectors import NullableReturnDetector
from smell_sentinel.detectors.nullable_return import reachable_returns, yields_null
from smell_sentinel.models import Severity
from smell_sentinel.rules import NULL_COLLECTION_RETURN, NULLABLE_RETURN
from smell_sentinel.scanning.syntax import (
    Block,
    Conditional,
    FunctionDecl,
    IfStmt,
    Literal,
    Opaque,
    ReturnStmt,
    SourceUnit,
    Span,
    ThrowStmt,
    TypeDecl,
    TypeRef,
    VariableRef,
)


def _detect(build_unit, context, source):
    return NullableReturnDetector().detect(build_unit(source), context)


class TestSentinelScenario:
    """An Optional return type is a documented sentinel; a plain type is not."""

    SOURCE = """\
        import java.util.Optional;

        public class Directions {
            public Optional<Direction> getDirection(Base b) {
                if (b.heading() == null) {
                    return null;
                }
                return Optional.of(UNKNOWN);
            }

            public Direction headingOf(Base b) {
                if (b.heading() == null) {
                    return null;
                }
                return b.heading();
            }
        }
        """

    def test_only_undocumented_path_is_flagged(self, build_unit, context):
        findings = _detect(build_unit, context, self.SOURCE)
        assert len(findings) == 1
        finding = findings[0]
        assert finding.rule_id == NULLABLE_RETURN
        assert finding.severity == Severity.WARNING
        assert finding.location.line == 13
        assert "headingOf()" in finding.message
        assert finding.suggested_fix is not None


class TestNullableReturn:
    """Test per-method nullability judgement."""

    def test_javadoc_exempts(self, build_unit, context):
        source = """\
            class Users {
                /** @return the user, or null if there is none */
                User find(String id) { return null; }
            }
            """
        assert _detect(build_unit, context, source) == []

    def test_negated_javadoc_does_not_exempt(self, build_unit, context):
        source = """\
            class Users {
                /** @return the user, never null */
                User find(String id) { return null; }
            }
            """
        assert [f.rule_id for f in _detect(build_unit, context, source)] == [NULLABLE_RETURN]

    def test_nullable_annotation_exempts(self, build_unit, context):
        source = """\
            class Users {
                @Nullable
                User find(String id) { return null; }
            }
            """
        assert _detect(build_unit, context, source) == []

    def test_ternary_and_cast_null(self, build_unit, context):
        source = """\
            class Users {
                User a(boolean f) { return f ? null : ANONYMOUS; }
                User b() { return (User) null; }
                User c() { return ANONYMOUS; }
            }
            """
        findings = _detect(build_unit, context, source)
        assert [f.location.line for f in findings] == [2, 3]

    def test_every_null_return_is_reported(self, build_unit, context):
        source = """\
            class Users {
                User find(int id) {
                    if (id < 0) {
                        return null;
                    }
                    for (User u : all) {
                        if (u.id == id) return u;
                    }
                    return null;
                }
            }
            """
        findings = _detect(build_unit, context, source)
        assert [f.location.line for f in findings] == [4, 9]

    def test_unreachable_return_is_ignored(self, build_unit, context):
        source = """\
            class Users {
                User find(int id) {
                    throw new UnsupportedOperationException();
                    return null;
                }
            }
            """
        assert _detect(build_unit, context, source) == []

    def test_lambda_returns_are_not_the_methods_returns(self, build_unit, context):
        source = """\
            class Users {
                User find(int id) {
                    Supplier<User> fallback = () -> { return null; };
                    return fallback.get();
                }
            }
            """
        assert _detect(build_unit, context, source) == []

    def test_switch_expression_arm_yielding_null(self, build_unit, context):
        source = """\
            class Users {
                User pick(int kind) {
                    return switch (kind) {
                        case 0 -> ANONYMOUS;
                        case 1 -> {
                            audit(kind);
                            yield null;
                        }
                        default -> ADMIN;
                    };
                }

                User safe(int kind) {
                    return switch (kind) {
                        case 0 -> ANONYMOUS;
                        default -> {
                            Supplier<User> s = () -> { return null; };
                            yield s.get();
                        }
                    };
                }
            }
            """
        findings = _detect(build_unit, context, source)
        assert [f.location.line for f in findings] == [3]

    def test_methods_of_embedded_classes_are_checked(self, build_unit, context):
        source = """\
            enum Lookup {
                FIRST {
                    User find() { return null; }
                };

                Runnable task() {
                    class Cache {
                        User cached() { return null; }
                    }
                    return new Runnable() {
                        public void run() {}
                        User current() { return null; }
                    };
                }
            }
            """
        findings = _detect(build_unit, context, source)
        assert sorted(f.location.line for f in findings) == [3, 8, 12]
        assert all(f.rule_id == NULLABLE_RETURN for f in findings)

    def test_skipped_declarations(self, build_unit, context):
        source = """\
            interface Repo {
                User find(int id);
            }

            class Impl {
                Impl() { return; }
                void reset() { return; }
                int size() { return 0; }
            }
            """
        assert _detect(build_unit, context, source) == []


class TestNullCollectionReturn:
    """Container return types never get the documentation exemption."""

    def test_list_return(self, build_unit, context):
        source = """\
            class Users {
                /** @return the users, or null if none */
                List<User> all() { return null; }
            }
            """
        findings = _detect(build_unit, context, source)
        assert [f.rule_id for f in findings] == [NULL_COLLECTION_RETURN]
        assert findings[0].severity == Severity.ERROR
        assert "List<User>" in findings[0].message

    def test_array_return(self, build_unit, context):
        source = """\
            class Users {
                User[] all() { return null; }
                String[] names() { return new String[0]; }
            }
            """
        findings = _detect(build_unit, context, source)
        assert [(f.rule_id, f.location.line) for f in findings] == [(NULL_COLLECTION_RETURN, 2)]

    def test_enum_constant_body(self, build_unit, context):
        source = """\
            enum Op {
                PLUS {
                    java.util.List<String> items() { return null; }
                };
            }
            """
        findings = _detect(build_unit, context, source)
        assert [(f.rule_id, f.location.line) for f in findings] == [(NULL_COLLECTION_RETURN, 3)]
        assert findings[0].message.startswith("Op.PLUS.items() returns null")


class TestHelpers:
    """Test the expression and control-flow helpers on synthetic trees."""

    def test_yields_null(self):
        null = Literal("null", "null")
        assert yields_null(null)
        assert yields_null(Conditional(VariableRef("f"), VariableRef("x"), null))
        assert yields_null(Opaque("cast", (null,)))
        assert not yields_null(VariableRef("x"))
        assert not yields_null(Opaque("lambda", text="() -> null"))
        assert yields_null(Opaque("switch", (VariableRef("k"), VariableRef("x"), null)))
        assert not yields_null(Opaque("switch", (null, VariableRef("x"))))

    def test_reachable_returns_stop_after_abrupt_completion(self):
        first = ReturnStmt(Literal("null", "null"), span=Span(3, 9, 3, 20))
        body = Block(
            (
                IfStmt(
                    VariableRef("a"),
                    ReturnStmt(VariableRef("x")),
                    ThrowStmt(VariableRef("e")),
                ),
                first,
            )
        )
        assert list(reachable_returns(body)) == [ReturnStmt(VariableRef("x"))]

    def test_synthetic_tree(self, context):
        """The detector runs on a hand-built tree with no parser involved."""
        ret = ReturnStmt(Literal("null", "null"), span=Span(7, 9, 7, 21))
        function = FunctionDecl(
            name="current",
            owner="Session",
            return_type=TypeRef("User"),
            body=Block((ret,)),
        )
        unit = SourceUnit("Session.java", "java", (TypeDecl("Session", "class", (function,)),))
        (finding,) = NullableReturnDetector().detect(unit, context)
        assert finding.location.file == "Session.java"
        assert finding.location.line == 7
        assert finding.location.column == 9

"""Tests for the flag-parameter rule."""

from smell_sentinel.config import DEFAULT_SIDE_EFFECT_SELECTORS
from smell_sentinel.detectors import FlagParameterDetector
from smell_sentinel.detectors.base import DetectorContext
from smell_sentinel.detectors.flag_parameter import (
    find_divergence,
    is_boolean_flag,
    significant_statements,
)
from smell_sentinel.rules import FLAG_PARAMETER
from smell_sentinel.scanning.syntax import (
    Block,
    ExprStmt,
    FunctionDecl,
    IfStmt,
    MethodCall,
    Parameter,
    TypeRef,
    VariableRef,
)


def _detect(build_unit, context, source):
    return FlagParameterDetector().detect(build_unit(source), context)


class TestFlagParameter:
    """Test flag detection on parsed sources."""

    def test_branches_doing_different_things(self, build_unit, context):
        source = """\
            class Renderer {
                void render(String text, boolean bold) {
                    if (bold) {
                        out.writeBold(text);
                    } else {
                        out.writePlain(text);
                    }
                }
            }
            """
        (finding,) = _detect(build_unit, context, source)
        assert finding.rule_id == FLAG_PARAMETER
        assert finding.location.line == 2
        assert "'bold'" in finding.message
        assert "at line 3" in finding.message
        assert "'out.writeBold(text);' vs 'out.writePlain(text);'" in finding.message
        assert [loc.line for loc in finding.related] == [3]

    def test_logging_only_difference_is_inert(self, build_unit, context):
        source = """\
            class Store {
                void save(Record r, boolean verbose) {
                    if (verbose) {
                        LOG.debug("saving");
                    }
                    store.put(r);
                }

                void load(Record r, boolean trace) {
                    if (trace) {
                        System.out.println("loading");
                        assert r != null;
                        store.get(r);
                    } else {
                        store.get(r);
                    }
                }
            }
            """
        assert _detect(build_unit, context, source) == []

    def test_one_sided_branch(self, build_unit, context):
        source = """\
            class Store {
                void save(Record r, boolean dryRun) {
                    if (!dryRun && r.isValid()) {
                        store.put(r);
                    }
                }
            }
            """
        (finding,) = _detect(build_unit, context, source)
        assert "'store.put(r);' vs '(nothing)'" in finding.message

    def test_ternary_selecting_objects(self, build_unit, context):
        source = """\
            class Printer {
                Formatter pick(boolean compact) {
                    return compact ? new CompactFormatter() : new PrettyFormatter();
                }

                int width(boolean wide) {
                    return wide ? 120 : 80;
                }
            }
            """
        findings = _detect(build_unit, context, source)
        assert [f.location.line for f in findings] == [2]

    def test_boxed_boolean(self, build_unit, context):
        source = """\
            class Jobs {
                void run(Boolean async) {
                    if (async) { executor.submit(job); } else { job.run(); }
                }
            }
            """
        assert len(_detect(build_unit, context, source)) == 1

    def test_non_boolean_and_pass_through(self, build_unit, context):
        source = """\
            class Jobs {
                void run(int mode) {
                    if (mode > 0) { start(); } else { stop(); }
                }

                void forward(boolean flag) {
                    helper.run(flag);
                }
            }
            """
        assert _detect(build_unit, context, source) == []

    def test_branches_differing_only_in_lambdas(self, build_unit, context):
        source = """\
            class Jobs {
                void schedule(boolean urgent) {
                    if (urgent) {
                        executor.submit(() -> runNow());
                    } else {
                        executor.submit(() -> runLater());
                    }
                }

                void submit(boolean retry) {
                    if (retry) {
                        executor.submit(() -> runNow());
                    } else {
                        executor.submit(() -> runNow());
                    }
                }
            }
            """
        findings = _detect(build_unit, context, source)
        assert [f.location.line for f in findings] == [2]
        assert "() -> runNow()" in findings[0].message
        assert "() -> runLater()" in findings[0].message

    def test_branches_differing_only_in_method_references(self, build_unit, context):
        source = """\
            class Names {
                void convert(Function names, boolean upper) {
                    if (upper) {
                        names.apply(String::toUpperCase);
                    } else {
                        names.apply(String::toLowerCase);
                    }
                }
            }
            """
        (finding,) = _detect(build_unit, context, source)
        assert "'upper'" in finding.message
        assert "String::toLowerCase" in finding.message


class TestHelpers:
    """Test branch comparison helpers on synthetic trees."""

    def _call(self, receiver, name):
        return ExprStmt(MethodCall(VariableRef(receiver), name))

    def test_significant_statements_drop_side_effects(self):
        branch = Block((self._call("log", "info"), self._call("repo", "save")))
        assert significant_statements(branch, DEFAULT_SIDE_EFFECT_SELECTORS) == (
            self._call("repo", "save"),
        )

    def test_find_divergence_reports_first_difference(self):
        body = Block(
            (
                IfStmt(
                    VariableRef("fast"),
                    Block((self._call("a", "prepare"), self._call("a", "quick"))),
                    Block((self._call("a", "prepare"), self._call("a", "slow"))),
                ),
            )
        )
        divergence = find_divergence(body, "fast", DEFAULT_SIDE_EFFECT_SELECTORS)
        assert divergence.first == "a.quick();"
        assert divergence.second == "a.slow();"

    def test_condition_must_test_the_parameter(self):
        body = Block((IfStmt(VariableRef("other"), self._call("a", "x"), self._call("a", "y")),))
        assert find_divergence(body, "fast", DEFAULT_SIDE_EFFECT_SELECTORS) is None

    def test_is_boolean_flag(self):
        flag = Parameter("fast", TypeRef("boolean", primitive=True), 0)
        number = Parameter("n", TypeRef("int", primitive=True), 1)
        body = Block((IfStmt(VariableRef("fast"), self._call("a", "x"), self._call("a", "y")),))
        function = FunctionDecl("go", "Car", TypeRef("void", primitive=True), (flag, number), body)
        assert is_boolean_flag(function, flag, DEFAULT_SIDE_EFFECT_SELECTORS)
        assert not is_boolean_flag(function, number, DEFAULT_SIDE_EFFECT_SELECTORS)

    def test_custom_side_effect_selectors(self, build_unit):
        source = """\
            class Store {
                void save(Record r, boolean audit) {
                    if (audit) { metrics.record(r); }
                    store.put(r);
                }
            }
            """
        quiet = DetectorContext(side_effect_selectors=frozenset({"record"}))
        assert FlagParameterDetector().detect(build_unit(source), quiet) == []

import unittest

from props.lang.error import ArgumentIndexOutOfRange, NonBooleanCondition, NonNumericOperand, UnboundIdentifier
from props.pure.evaluator import Environment, equals, evaluate
from props.pure.nodes import ADD, EQ, NOT_EQ, SUB, ArgumentRef, BinaryOp, IdentifierRef, If, Let, NumberLiteral


def run(node, *arguments, environment=Environment.EMPTY):
    return evaluate(node, environment, arguments)


class EnvironmentTestCase(unittest.TestCase):

    def test_extend_does_not_mutate(self):
        outer = Environment.EMPTY.extend("x", 1.0)
        inner = outer.extend("y", 2.0)
        shadowed = inner.extend("x", 3.0)

        self.assertEqual({"x": 1.0}, dict(outer))
        self.assertEqual({"x": 1.0, "y": 2.0}, dict(inner))
        self.assertEqual(3.0, shadowed.lookup("x"))
        self.assertEqual(0, len(Environment.EMPTY))

    def test_lookup(self):
        env = Environment({"x": True})
        self.assertIs(True, env.lookup("x"))

        with self.assertRaises(UnboundIdentifier) as context:
            env.lookup("y")
        self.assertEqual("y", context.exception.name)


class EvaluateTestCase(unittest.TestCase):

    def test_literals_and_arguments(self):
        self.assertEqual(5.0, run(NumberLiteral(5.0)))
        self.assertEqual(7, run(ArgumentRef(1), 7, 2))
        self.assertEqual(2, run(ArgumentRef(2), 7, 2))

    def test_arithmetic(self):
        pairs = [(1.0, 2.0), (-4.5, 0.5), (0.1, 0.2), (1e308, 1e308), (3, 7)]
        for a, b in pairs:
            self.assertEqual(a + b, run(BinaryOp(ADD, ArgumentRef(1), ArgumentRef(2)), a, b), (a, b))
            self.assertEqual(a - b, run(BinaryOp(SUB, ArgumentRef(1), ArgumentRef(2)), a, b), (a, b))

        self.assertIsInstance(run(BinaryOp(ADD, ArgumentRef(1), ArgumentRef(2)), 3, 7), float)

    def test_long_chains(self):
        tree = NumberLiteral(1.0)
        for _ in range(4999):
            tree = BinaryOp(ADD, tree, NumberLiteral(1.0))
        self.assertEqual(5000.0, run(tree))

        tree = ArgumentRef(1)
        for n in range(5000):
            tree = BinaryOp(SUB if n % 2 else ADD, tree, ArgumentRef(2))
        self.assertEqual(7.0, run(tree, 7, 3))

    def test_chain_operand_order(self):
        # operands are evaluated left to right before either is checked
        tree = BinaryOp(ADD, BinaryOp(ADD, ArgumentRef(1), NumberLiteral(1.0)), IdentifierRef("z"))
        self.assertRaises(NonNumericOperand, run, tree, True)
        self.assertRaises(UnboundIdentifier, run, BinaryOp(ADD, ArgumentRef(1), IdentifierRef("z")), True)

    def test_equality(self):
        for value in [0.0, 5.0, -2.5, True, False]:
            self.assertIs(True, run(BinaryOp(EQ, ArgumentRef(1), ArgumentRef(1)), value), value)
            self.assertIs(False, run(BinaryOp(NOT_EQ, ArgumentRef(1), ArgumentRef(1)), value), value)

        self.assertIs(True, run(BinaryOp(EQ, NumberLiteral(3.0), ArgumentRef(1)), 3))
        self.assertIs(False, run(BinaryOp(EQ, NumberLiteral(1.0), NumberLiteral(2.0))))

        # nan is the one value that is not equal to itself
        nan = float("nan")
        self.assertIs(False, run(BinaryOp(EQ, ArgumentRef(1), ArgumentRef(1)), nan))
        self.assertIs(True, run(BinaryOp(NOT_EQ, ArgumentRef(1), ArgumentRef(1)), nan))
        overflow = BinaryOp(SUB, NumberLiteral(1e400), NumberLiteral(1e400))
        self.assertIs(False, run(Let("x", overflow, BinaryOp(EQ, IdentifierRef("x"), IdentifierRef("x")))))

    def test_equality_does_not_coerce(self):
        self.assertFalse(equals(True, 1.0))
        self.assertFalse(equals(0, False))
        self.assertIs(True, run(BinaryOp(NOT_EQ, ArgumentRef(1), ArgumentRef(2)), 1.0, True))

    def test_let(self):
        tree = Let("x", ArgumentRef(1), Let("y", ArgumentRef(2), BinaryOp(ADD, IdentifierRef("x"),
                                                                       IdentifierRef("y"))))
        self.assertEqual(9.0, run(tree, 6, 3))

    def test_let_shadowing(self):
        # let x 1 in (let x 2 in x) plus x
        tree = Let("x", NumberLiteral(1.0), BinaryOp(ADD, Let("x", NumberLiteral(2.0), IdentifierRef("x")),
                                                     IdentifierRef("x")))
        self.assertEqual(3.0, run(tree))

    def test_let_bound_cannot_see_itself(self):
        tree = Let("x", BinaryOp(ADD, IdentifierRef("x"), NumberLiteral(1.0)), IdentifierRef("x"))
        self.assertRaises(UnboundIdentifier, run, tree)

        outer = Environment.EMPTY.extend("x", 10.0)
        self.assertEqual(11.0, run(tree, environment=outer))

    def test_if_selects_branch(self):
        tree = If(BinaryOp(EQ, ArgumentRef(1), ArgumentRef(2)), NumberLiteral(1.0), NumberLiteral(0.0))
        self.assertEqual(1.0, run(tree, 3, 3))
        self.assertEqual(0.0, run(tree, 2, 3))

    def test_if_does_not_evaluate_other_branch(self):
        taken_then = If(BinaryOp(EQ, NumberLiteral(1.0), NumberLiteral(1.0)), NumberLiteral(1.0), IdentifierRef("nope"))
        taken_else = If(BinaryOp(EQ, NumberLiteral(1.0), NumberLiteral(2.0)), IdentifierRef("nope"), NumberLiteral(2.0))

        self.assertEqual(1.0, run(taken_then))
        self.assertEqual(2.0, run(taken_else))

    def test_errors(self):
        with self.assertRaises(ArgumentIndexOutOfRange) as context:
            run(ArgumentRef(3), 1, 2)
        self.assertEqual(3, context.exception.index)
        self.assertEqual(2, context.exception.available)

        with self.assertRaises(UnboundIdentifier) as context:
            run(BinaryOp(ADD, NumberLiteral(1.0), IdentifierRef("z")))
        self.assertEqual("z", context.exception.name)

        with self.assertRaises(NonBooleanCondition) as context:
            run(If(NumberLiteral(1.0), NumberLiteral(2.0), NumberLiteral(3.0)))
        self.assertEqual(1.0, context.exception.value)

        self.assertRaises(NonNumericOperand, run, BinaryOp(ADD, ArgumentRef(1), NumberLiteral(1.0)), True)
        self.assertRaises(NonNumericOperand, run, BinaryOp(SUB, NumberLiteral(1.0), ArgumentRef(1)), "2")


if __name__ == '__main__':
    unittest.main()

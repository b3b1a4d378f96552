"""cellgrid.calc - Formula parsing and recalculation for cellgrid spreadsheets."""

from cellgrid.calc._evaluator import SheetEvaluator
from cellgrid.calc._graph import DependencyGraph
from cellgrid.calc._parser import FormulaParser, FormulaSyntaxError, cell_references, parse
from cellgrid.calc._protocol import CellDelta, ErrorKind, FormulaResult, RecalcResult
from cellgrid.calc._tree import ConstantNode, ExpressionTree, OperatorNode, VariableNode

__all__ = [
    "CellDelta",
    "ConstantNode",
    "DependencyGraph",
    "ErrorKind",
    "ExpressionTree",
    "FormulaParser",
    "FormulaResult",
    "FormulaSyntaxError",
    "OperatorNode",
    "RecalcResult",
    "SheetEvaluator",
    "VariableNode",
    "cell_references",
    "parse",
]

"""
Branch-and-Bound MILP Backend

Depth-first branch-and-bound over the dense two-phase simplex for

    minimize    c @ x
    subject to  A @ x <= b
                x >= 0, x integer

with non-negative objective coefficients.

Features:
- Explicit LIFO stack of subproblems (no recursion)
- Branching on the leftmost fractional variable, ceil child explored first
- Pruning when a relaxation cannot strictly beat the incumbent
- Infeasible and unbounded relaxations absorbed as dead branches
- Node and pivot ceilings reported as limit statuses, never as optimal
- Optional exploration record of every node for inspection
"""

from __future__ import annotations

import logging
import math
import time
from typing import Dict, List, Optional

import autograd.numpy as np  # type: ignore

from ..constants import DEFAULT_EPSILON, DEFAULT_LP_MAX_ITERATIONS, DEFAULT_MAX_NODES
from .base import ProblemData, SolverResult, SolverStats, SolverStatus
from .bnb.node import BBStats, NodeOutcome, NodeRecord, Subproblem
from .bnb.utils import (
    create_child_subproblems,
    first_fractional_index,
    integral_value,
    round_to_integers,
)
from .simplex import solve_lp

logger = logging.getLogger(__name__)


class BranchAndBoundBackend:
    """
    Depth-first branch-and-bound solver for small integer linear programs.

    Every explored node solves its LP relaxation from scratch with
    ``solve_lp``; nodes share nothing but the objective vector.
    """

    def solve(
        self,
        problem_data: ProblemData,
        solver: str,  # noqa: ARG002 - ignored, uses the internal simplex
        solver_options: Dict[str, object],
    ) -> SolverResult:
        """
        Solve an integer program using branch-and-bound.

        Args:
            problem_data: The constraint rows and objective
            solver: Ignored (uses the internal simplex)
            solver_options: Options:
                - epsilon: Feasibility/pivot/integrality tolerance (default: 1e-9)
                - max_nodes: Maximum nodes to explore (default: 100000)
                - lp_max_iterations: Maximum pivots per LP relaxation (default: 10000)
                - record_tree: Keep a NodeRecord per explored node (default: False)
                - verbose: Print progress (default: False)

        Returns:
            SolverResult with the best integer solution found
        """
        start_time = time.time()

        options = dict(solver_options)
        epsilon = float(options.pop("epsilon", DEFAULT_EPSILON))
        max_nodes = int(options.pop("max_nodes", DEFAULT_MAX_NODES))
        lp_max_iterations = int(options.pop("lp_max_iterations", DEFAULT_LP_MAX_ITERATIONS))
        record_tree = bool(options.pop("record_tree", False))
        verbose = bool(options.pop("verbose", False))
        for key in options:
            logger.warning(f"Ignoring unknown branch-and-bound option '{key}'")

        if max_nodes < 1:
            raise ValueError(f"max_nodes must be positive, got {max_nodes}")

        stats = BBStats()
        tree: List[NodeRecord] = []

        incumbent_x: Optional[np.ndarray] = None
        incumbent_obj = math.inf
        limit_status: Optional[SolverStatus] = None
        root_unbounded = False

        root = Subproblem(
            node_id=0,
            depth=0,
            constraints=problem_data.constraints.copy(),
            objective=np.asarray(problem_data.objective, dtype=float),
        )
        stack: List[Subproblem] = [root]
        node_counter = 1

        if verbose:
            print(f"Branch-and-Bound: {problem_data.n_vars} integer variables, "
                  f"{problem_data.constraints.rows} constraints")
            print(f"{'Nodes':>8} {'Depth':>6} {'Incumbent':>12} {'Stack':>8} {'Time':>8}")
            print("-" * 46)

        while stack:
            if stats.nodes_explored >= max_nodes:
                logger.warning(
                    f"Node limit reached ({max_nodes}) with {len(stack)} node(s) unexplored"
                )
                limit_status = SolverStatus.MAX_NODES
                break

            node = stack.pop()
            stats.nodes_explored += 1
            stats.max_depth = max(stats.max_depth, node.depth)

            lp = solve_lp(node.constraints, node.objective, epsilon, lp_max_iterations)
            stats.lp_solves += 1
            stats.lp_pivots += lp.iterations
            if node.node_id == 0:
                stats.root_bound = lp.value

            branch_idx = None
            if lp.status == SolverStatus.MAX_ITERATIONS:
                outcome = NodeOutcome.LIMIT
                limit_status = SolverStatus.MAX_ITERATIONS
            elif lp.status == SolverStatus.INFEASIBLE:
                outcome = NodeOutcome.INFEASIBLE
                stats.nodes_infeasible += 1
            elif lp.status == SolverStatus.UNBOUNDED:
                outcome = NodeOutcome.UNBOUNDED
                stats.nodes_unbounded += 1
                if node.node_id == 0:
                    root_unbounded = True
            elif lp.value >= incumbent_obj - epsilon:
                # Relaxation lower-bounds every integer completion of this node
                outcome = NodeOutcome.PRUNED
                stats.nodes_pruned += 1
            else:
                branch_idx = first_fractional_index(lp.x, epsilon)
                if branch_idx is None:
                    outcome = NodeOutcome.INTEGRAL
                    stats.integral_solutions += 1
                    if lp.value < incumbent_obj:
                        incumbent_x = lp.x.copy()
                        incumbent_obj = lp.value
                        logger.info(
                            f"New incumbent {incumbent_obj:.6g} at node {node.node_id} "
                            f"(depth {node.depth})"
                        )
                        if verbose:
                            elapsed_now = time.time() - start_time
                            print(f"{stats.nodes_explored:>8} {node.depth:>6} "
                                  f"{incumbent_obj:>12.4e} {len(stack):>8} "
                                  f"{elapsed_now:>7.1f}s *")
                else:
                    outcome = NodeOutcome.BRANCHED
                    stats.nodes_branched += 1
                    left, right = create_child_subproblems(
                        node, branch_idx, float(lp.x[branch_idx]), node_counter
                    )
                    node_counter += 2
                    stack.append(left)
                    stack.append(right)

            logger.debug(
                f"Node {node.node_id} (depth {node.depth}): {outcome.value}, "
                f"relaxation {lp.value:.6g}"
            )
            if record_tree:
                tree.append(
                    NodeRecord(
                        node_id=node.node_id,
                        parent_id=node.parent_id,
                        depth=node.depth,
                        lp_value=lp.value,
                        outcome=outcome,
                        branch_index=branch_idx,
                        branch=node.branch,
                    )
                )

            if limit_status is not None:
                break

            if verbose and stats.nodes_explored % 100 == 0:
                elapsed_now = time.time() - start_time
                inc_str = f"{incumbent_obj:>12.4e}" if incumbent_x is not None else "         inf"
                print(f"{stats.nodes_explored:>8} {node.depth:>6} {inc_str} "
                      f"{len(stack):>8} {elapsed_now:>7.1f}s")

        solve_time = time.time() - start_time

        if limit_status is not None:
            status = limit_status
        elif root_unbounded:
            status = SolverStatus.UNBOUNDED
        elif incumbent_x is None:
            status = SolverStatus.INFEASIBLE
        else:
            status = SolverStatus.OPTIMAL

        x_sol = None
        objective_value = None
        if incumbent_x is not None:
            x_sol = round_to_integers(incumbent_x)
            objective_value = integral_value(
                float(np.dot(root.objective, x_sol)), epsilon
            )

        if verbose:
            print("-" * 46)
            print(f"Status: {status}")
            print(f"Nodes explored: {stats.nodes_explored}")
            print(f"Nodes pruned: {stats.nodes_pruned}")
            print(f"LP pivots: {stats.lp_pivots}")
            if objective_value is not None:
                print(f"Best objective: {objective_value}")

        solver_stats = SolverStats(
            solver_name="B&B(simplex)",
            solve_time=solve_time,
            setup_time=problem_data.setup_time,
            num_iters=stats.nodes_explored,
        )

        return SolverResult(
            x=x_sol,
            status=status,
            stats=solver_stats,
            objective_value=objective_value,
            raw_result={
                "bb_stats": stats,
                "incumbent_obj": incumbent_obj if incumbent_x is not None else None,
                "root_bound": stats.root_bound,
                "tree": tree if record_tree else None,
                "unexplored": len(stack),
            },
        )

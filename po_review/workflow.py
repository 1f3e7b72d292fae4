"""LangGraph workflow producing the dashboard data.

Defines the graph structure: nodes, edges, and conditional routing. The
graph is pure apart from the fetch node, which is the only place that talks
to the record store.
"""
from langgraph.graph import StateGraph, END

from po_review.core.workflow_state import DashboardWorkflowState
from po_review.nodes.fetch import FetchNode
from po_review.nodes.classify import ClassifyNode
from po_review.nodes.order import OrderNode
from po_review.nodes.summarize import SummarizeNode
from po_review.nodes.report import ReportNode


def should_continue_after_fetch(state: DashboardWorkflowState) -> str:
    """Route after fetch: classify the batch, or report the store failure."""
    if state.get("final_status") == "error":
        return "report"
    return "classify"


def build_graph(
    fetch_node: FetchNode,
    classify_node: ClassifyNode,
    order_node: OrderNode,
    summarize_node: SummarizeNode,
    report_node: ReportNode,
):
    """Build and compile the dashboard workflow graph.

    Graph structure:
        fetch → (ok?) → classify → order → summarize → report
              ↘ (store failure) → report

    Returns a compiled LangGraph that can be invoked with a DashboardWorkflowState.
    """
    graph = StateGraph(DashboardWorkflowState)

    graph.add_node("fetch", fetch_node)
    graph.add_node("classify", classify_node)
    graph.add_node("order", order_node)
    graph.add_node("summarize", summarize_node)
    graph.add_node("report", report_node)

    graph.set_entry_point("fetch")

    graph.add_conditional_edges(
        "fetch",
        should_continue_after_fetch,
        {"classify": "classify", "report": "report"},
    )

    graph.add_edge("classify", "order")
    graph.add_edge("order", "summarize")
    graph.add_edge("summarize", "report")
    graph.add_edge("report", END)

    return graph.compile()

"""
U(N) → U(3) Reduction Explorer
Streamlit application for reducing HO-shell U(N) irreps into U(3) irreps
"""
import streamlit as st
import pandas as pd
import plotly.graph_objects as go
from typing import List

from gelfand_patterns import MAXIMUM_UN_LABEL, pattern_to_string, weight_to_string
from lowering_steps import LoweringStepCache
from ho_quanta import HOQuantaTable, AXES
from irrep_labels import (
    ReductionRequest, labels_from_representation, shell_particle_count,
)
from u3_reduction import reduce_irrep, ReductionResult

st.set_page_config(
    page_title="U(N) → U(3) Reduction",
    page_icon="🔬",
    layout="wide"
)

# Built once per session, shared read-only by every reduction
if 'cache' not in st.session_state:
    st.session_state.cache = LoweringStepCache()


def irreps_dataframe(result: ReductionResult) -> pd.DataFrame:
    """Table of U(3) irreps with nonzero level dimensionality."""
    rows = []
    for irrep in result.irreps:
        lam, mu = irrep.su3
        rows.append({
            'U(3) irrep': weight_to_string(irrep.weight),
            '(λ, μ)': f"({lam}, {mu})",
            'D_l': irrep.multiplicity,
            'dim': irrep.dimension,
            'D_l × dim': irrep.multiplicity * irrep.dimension,
        })
    return pd.DataFrame(rows)


def weights_dataframe(result: ReductionResult) -> pd.DataFrame:
    """Raw weight multiplicities."""
    rows = [
        {'f1': w[0], 'f2': w[1], 'f3': w[2], 'Multiplicity': m}
        for w, m in sorted(result.mult_map.items(), reverse=True)
    ]
    return pd.DataFrame(rows)


def quanta_dataframe(n: int) -> pd.DataFrame:
    table = HOQuantaTable(n)
    return pd.DataFrame({f"n{axis}": table.table[i] for i, axis in enumerate(AXES)})


def multiplicity_figure(result: ReductionResult) -> go.Figure:
    """Bar chart of level dimensionalities by SU(3) label."""
    fig = go.Figure()
    fig.add_trace(go.Bar(
        x=[f"({i.su3[0]},{i.su3[1]})" for i in result.irreps],
        y=[i.multiplicity for i in result.irreps],
        marker_color='#6366f1',
        text=[str(i.multiplicity) for i in result.irreps],
        textposition='outside'
    ))
    fig.update_layout(
        title=f"U(3) irreps in {pattern_to_string(result.request.labels)}",
        xaxis_title="(λ, μ)",
        yaxis_title="D_l",
        height=400,
        showlegend=False
    )
    return fig


def main():
    st.title("🔬 U(N) → U(3) Reduction")
    st.markdown("Reduce an HO-shell U(N) irrep, N = (n+1)(n+2)/2, into U(3) irreps "
                "by exhaustive Gelfand-pattern descent.")

    if 'shell' not in st.session_state:
        st.session_state.shell = 2
        st.session_state.representation = [1, 0, 4, 0, 1]
    if 'result' not in st.session_state:
        st.session_state.result = None

    # Sidebar for examples
    with st.sidebar:
        st.header("📚 Quick Examples")
        examples = {
            '[4,2,2,2,2,0] (n=2)': (2, [1, 0, 4, 0, 1]),
            '[4,0,0] (n=1)': (1, [1, 0, 0, 0, 2]),
            '[2,2,1,1,0,0] (n=2)': (2, [0, 0, 2, 2, 2]),
            '[1,1,1,1,1,1] (n=2)': (2, [0, 0, 0, 6, 0]),
            '[4,0,0,0,0,0,0,0,0,0] (n=3)': (3, [1, 0, 0, 0, 9]),
        }
        for name, (n, rep) in examples.items():
            if st.button(name, use_container_width=True):
                st.session_state.shell = n
                st.session_state.representation = list(rep)
                st.session_state.result = None
                st.rerun()

    col1, col2 = st.columns([1, 2])

    with col1:
        st.header("⚙️ Input Irrep")
        n = st.number_input("HO shell n", min_value=0, max_value=6,
                            value=st.session_state.shell)
        N = shell_particle_count(int(n))
        st.caption(f"N = (n+1)(n+2)/2 = {N}")

        rcols = st.columns(MAXIMUM_UN_LABEL + 1)
        representation: List[int] = []
        for k, rcol in enumerate(rcols):
            with rcol:
                label = MAXIMUM_UN_LABEL - k
                representation.append(int(st.number_input(
                    f"r{label}", min_value=0, max_value=64,
                    value=st.session_state.representation[k])))

        request = ReductionRequest(int(n), representation)
        st.text(f"[f] = {pattern_to_string(labels_from_representation(representation))}")

        issues = request.validate()
        for issue in issues:
            st.warning(issue)

        if st.button("🧮 Reduce", type="primary", use_container_width=True, disabled=bool(issues)):
            with st.spinner("Generating U(3) weights..."):
                st.session_state.result = reduce_irrep(request, cache=st.session_state.cache)

        with st.expander("HO quanta table"):
            st.dataframe(quanta_dataframe(int(n)), use_container_width=True)

    with col2:
        result = st.session_state.result
        if result is None:
            st.info("👈 Choose an irrep and press Reduce")
            return

        st.header("📊 U(3) Content")
        mcols = st.columns(4)
        with mcols[0]:
            st.metric("dim U(N) irrep", result.un_dimension)
        with mcols[1]:
            st.metric("Σ D_l × dim", result.total_dimension)
        with mcols[2]:
            st.metric("U(3) irreps", len(result.irreps))
        with mcols[3]:
            st.metric("Time (s)", f"{result.elapsed:.3f}")

        if result.consistent:
            st.success("✓ U(3) dimensions add up to the U(N) dimension")
        else:
            st.error(f"Dimension mismatch: {result.total_dimension} != {result.un_dimension}")

        st.dataframe(irreps_dataframe(result), use_container_width=True, hide_index=True)
        st.plotly_chart(multiplicity_figure(result), use_container_width=True)

        with st.expander(f"{len(result.mult_map)} raw U(3) weights"):
            st.dataframe(weights_dataframe(result), use_container_width=True, hide_index=True)

    # Footer
    st.markdown("---")
    st.caption("U(N) → U(3) Reduction • Gelfand patterns • HO shell model")


if __name__ == "__main__":
    main()

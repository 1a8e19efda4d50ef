import os

import pandas as pd
import streamlit as st
from dotenv import load_dotenv

load_dotenv()

# =========================
# Page config + style
# =========================
st.set_page_config(page_title="Smart Prioritization Engine", page_icon="🧪", layout="wide")

st.title("🧪 Smart Prioritization Engine")
st.caption("Intelligent ranking of AI-generated thermoelectric material candidates")

st.markdown(
    """
<style>
.stButton>button { border-radius: 12px; padding: 0.5rem 0.9rem; }
.card {
  border: 1px solid rgba(255,255,255,0.12);
  border-radius: 18px;
  padding: 14px 16px;
  background: rgba(255,255,255,0.03);
}
.small { opacity: 0.8; font-size: 0.9rem; }
</style>
""",
    unsafe_allow_html=True,
)

from material_feed import load_materials
from material_stats import (
    calculate_stats,
    chart_frame,
    filter_by_status,
    format_currency,
    format_date,
    format_relative_time,
    recommendation,
    score_summary,
    scored_frame,
    weighted_contributions,
)
from materials import MaterialStatus
from prioritization import (
    CRITERIA,
    CRITERIA_LABELS,
    DEFAULT_WEIGHTS,
    PriorityWeights,
    calculate_roi,
    rank_materials,
    round_half_up,
    top_candidates,
)

MATERIALS_SOURCE = (os.environ.get("MATERIALS_SOURCE") or "").strip()

CRITERIA_HELP = {
    "efficiency": "Predicted thermoelectric figure of merit",
    "cost": "Lower synthesis cost preferred",
    "synthesis_complexity": "Lower complexity preferred",
    "toxicity": "Lower toxicity preferred",
    "availability": "Precursor material availability",
    "novelty": "Uniqueness of material structure",
    "commercial_viability": "Market readiness potential",
    "synthesis_time": "Shorter synthesis time preferred",
}


@st.cache_data(show_spinner=False)
def cached_materials(source: str):
    return load_materials(source or None)


try:
    materials = cached_materials(MATERIALS_SOURCE)
except Exception as e:
    st.error(f"Could not load materials from '{MATERIALS_SOURCE or 'materials_sample.csv'}'.\n\n{e}")
    st.stop()

# =========================
# Sidebar: weights
# =========================
def reset_weights() -> None:
    for name in CRITERIA:
        st.session_state[f"w_{name}"] = getattr(DEFAULT_WEIGHTS, name)


for name in CRITERIA:
    st.session_state.setdefault(f"w_{name}", getattr(DEFAULT_WEIGHTS, name))

st.sidebar.header("Priority weights")
for name in CRITERIA:
    st.sidebar.slider(CRITERIA_LABELS[name], 0.0, 1.0, step=0.05, key=f"w_{name}", help=CRITERIA_HELP[name])

weights = PriorityWeights(**{name: float(st.session_state[f"w_{name}"]) for name in CRITERIA})

total_weight = weights.total()
if weights.is_balanced():
    st.sidebar.success(f"Total weight: {total_weight:.2f} (balanced)")
else:
    st.sidebar.warning(f"Total weight: {total_weight:.2f} (scores scale with the weight sum)")
st.sidebar.button("Reset to defaults", on_click=reset_weights)

st.sidebar.divider()
top_n = st.sidebar.slider("Top candidates to show", 3, 15, 5, 1)

# =========================
# Stats
# =========================
stats = calculate_stats(materials)
cols = st.columns(6)
cols[0].metric("Materials in Queue", stats["queued"], help="Ready for synthesis")
cols[1].metric("In Synthesis", stats["in_synthesis"], help="Active lab work")
cols[2].metric("Testing Phase", stats["testing"], help="Under validation")
cols[3].metric("Avg. Predicted ZT", f"{stats['avg_zt']:.2f}", help="Industry standard: 1.0")
cols[4].metric("Avg. Synthesis Cost", format_currency(stats["avg_cost"]), help="Per material")
cols[5].metric("Total Candidates", stats["total"])

ranked = rank_materials(materials, weights)
top = top_candidates(materials, int(top_n), weights)

tabs = st.tabs(["1) Top candidates", "2) All materials", "3) Material detail"])

# -------------------------
# Tab 1
# -------------------------
with tabs[0]:
    st.subheader("Top candidates for synthesis")
    st.caption("Materials ranked by priority score (Queued status only)")

    if not top:
        st.info("No Queued materials in this dataset.")
    else:
        df_top = scored_frame(top)
        st.bar_chart(chart_frame(top)["priority_score"])

        summary = score_summary(top)
        c1, c2, c3 = st.columns(3)
        c1.metric("Highest Score", f"{summary['highest']:.2f}")
        c2.metric("Average Score", f"{summary['average']:.2f}")
        c3.metric("Candidates Shown", summary["count"])

        st.dataframe(
            df_top[["rank", "id", "name", "formula", "priority_score", "roi", "lab_partner"]],
            use_container_width=True,
            hide_index=True,
        )

# -------------------------
# Tab 2
# -------------------------
with tabs[1]:
    st.subheader("All materials")
    options = ["all"] + [s.value for s in MaterialStatus]
    status = st.selectbox("Filter by status", options, index=0, format_func=lambda s: "All Materials" if s == "all" else s)

    shown = filter_by_status(ranked, status)
    df_all = scored_frame(shown)
    if df_all.empty:
        st.info("No materials match this filter.")
    else:
        st.dataframe(df_all, use_container_width=True, hide_index=True)
        st.download_button(
            "⬇️ Download this view (CSV)",
            data=df_all.to_csv(index=False).encode("utf-8"),
            file_name="materials_ranked.csv",
            mime="text/csv",
        )

# -------------------------
# Tab 3
# -------------------------
with tabs[2]:
    st.subheader("Material detail")
    if not ranked:
        st.info("No materials to show.")
    else:
        labels = {s.id: f"#{s.rank} {s.id} - {s.name} ({s.formula})" for s in ranked}
        chosen = st.selectbox("Material", list(labels.keys()), format_func=lambda k: labels[k])
        s = next(x for x in ranked if x.id == chosen)

        st.markdown('<div class="card">', unsafe_allow_html=True)
        head = st.columns([2.8, 1.2])
        with head[0]:
            st.markdown(
                f"**{s.name}**  \n<span class='small'>{s.formula} | {s.status.value} | "
                f"Lab: {s.lab_partner or 'unassigned'} | Generated {format_date(s.generated_date)} "
                f"({format_relative_time(s.generated_date)})</span>",
                unsafe_allow_html=True,
            )
        with head[1]:
            st.metric("Priority Score", f"{s.priority_score:.2f}")
        st.progress(min(1.0, max(0.0, s.priority_score / 10)))
        st.markdown("</div>", unsafe_allow_html=True)

        p1, p2, p3, p4 = st.columns(4)
        p1.metric("Predicted ZT", f"{s.predicted_zt:.2f}")
        p2.metric("Estimated Cost", format_currency(s.estimated_cost))
        p3.metric("Synthesis Time", f"{s.estimated_synthesis_time:g} days")
        p4.metric("ROI Metric", f"{calculate_roi(s.material):.2f}", help="ZT gain over 1.0 per £1000")

        contrib = weighted_contributions(s, weights)
        df_b = pd.DataFrame(
            [
                {
                    "criterion": CRITERIA_LABELS[name],
                    "normalized (0-10)": round_half_up(getattr(s.breakdown, name)),
                    "weight": getattr(weights, name),
                    "contribution": round_half_up(contrib[name], 3),
                }
                for name in CRITERIA
            ]
        )
        st.write("### Priority score breakdown")
        st.dataframe(df_b, use_container_width=True, hide_index=True)

        rec = recommendation(s.priority_score)
        show = {"high": st.success, "medium": st.warning, "low": st.error}[rec["level"]]
        show(f"**{rec['headline']}**\n\n{rec['advice']}")

        if s.notes:
            st.caption(f"Notes: {s.notes}")

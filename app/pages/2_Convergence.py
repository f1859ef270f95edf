"""Convergence study page."""

import sys
from pathlib import Path

import streamlit as st

# Add app directory to path for component imports
app_dir = Path(__file__).parent.parent
if str(app_dir) not in sys.path:
    sys.path.insert(0, str(app_dir))

from binomsim.core.config import ExperimentConfig
from binomsim.core.errors import ConfigurationError, SimulationError
from binomsim.experiment.analysis import convergence_study
from components.distribution_chart import build_convergence_figure

st.set_page_config(page_title="Convergence - binomsim", page_icon="📈", layout="wide")

st.title("📈 Convergence")

st.markdown(
    "The simulated frequency of one success count should approach the exact "
    "probability, with an error shrinking roughly as 1/√iterations."
)

col1, col2, col3, col4 = st.columns(4)
with col1:
    trials = st.number_input("Trials per experiment", min_value=1, value=50)
with col2:
    probability = st.slider("Success probability", 0.01, 1.0, 0.95, step=0.01)
with col3:
    target = st.number_input("Target successes", min_value=0, value=47)
with col4:
    n_se = st.slider("Tolerance (standard errors)", 1.0, 5.0, 3.0, step=0.5)

levels = st.multiselect(
    "Iteration levels",
    [1_000, 10_000, 100_000, 1_000_000],
    default=[1_000, 10_000, 100_000],
)

if st.button("Run study", type="primary", use_container_width=True):
    try:
        config = ExperimentConfig(
            iterations=1,
            trials=int(trials),
            success_probability=float(probability),
            random_seed=42,
        )
        with st.spinner("Simulating..."):
            result = convergence_study(config, int(target), sorted(levels), n_se=n_se)
    except ConfigurationError as e:
        st.error(f"Invalid configuration: {e}")
        st.stop()
    except ValueError as e:
        st.error(f"Cannot run study: {e}")
        st.stop()
    except SimulationError as e:
        st.error(f"Simulation failed: {e}")
        st.stop()

    st.info(result.summary())
    st.plotly_chart(build_convergence_figure(result), use_container_width=True)
    st.dataframe(result.to_dataframe(), use_container_width=True)

"""Run experiment page."""

import sys
from pathlib import Path

import streamlit as st

# Add app directory to path for component imports
app_dir = Path(__file__).parent.parent
if str(app_dir) not in sys.path:
    sys.path.insert(0, str(app_dir))

from binomsim.core.config import ExperimentConfig
from binomsim.core.errors import ConfigurationError, SimulationError
from binomsim.exact.calculator import ExactProbabilityCalculator
from binomsim.exact.coefficient import CoefficientStrategy
from binomsim.exact.precision import PrecisionContext
from binomsim.experiment.analysis import frequency_ci, within_tolerance
from binomsim.experiment.runner import run_experiment
from components.distribution_chart import build_distribution_figure

st.set_page_config(page_title="Experiment - binomsim", page_icon="▶️", layout="wide")

st.title("▶️ Run Experiment")

with st.sidebar:
    st.header("Parameters")
    iterations = st.number_input("Iterations", min_value=1, value=100_000, step=10_000)
    trials = st.number_input("Trials per experiment", min_value=1, value=50)
    probability = st.slider("Success probability", 0.01, 1.0, 0.95, step=0.01)
    target = st.number_input("Target successes", min_value=0, value=43)
    seed = st.number_input("Random seed", min_value=0, value=42)
    digits = st.slider("Precision (digits)", 16, 100, 34)
    strategy = st.radio(
        "Coefficient strategy",
        [s.value for s in CoefficientStrategy],
        horizontal=True,
    )

if st.button("🚀 Run Experiment", type="primary", use_container_width=True):
    try:
        config = ExperimentConfig(
            iterations=int(iterations),
            trials=int(trials),
            success_probability=float(probability),
            random_seed=int(seed),
        )
        precision = PrecisionContext(digits=digits)
        progress_bar = st.progress(0)

        def progress_callback(current: int, total: int) -> None:
            progress_bar.progress(current / total)

        report = run_experiment(
            config,
            int(target),
            precision=precision,
            strategy=CoefficientStrategy(strategy),
            progress_callback=progress_callback,
        )
    except ConfigurationError as e:
        st.error(f"Invalid configuration: {e}")
        st.stop()
    except SimulationError as e:
        st.error(f"Simulation failed: {e}")
        st.stop()

    st.session_state.report = report
    st.session_state.exact = ExactProbabilityCalculator(
        config, precision, CoefficientStrategy(strategy)
    ).distribution()

report = st.session_state.get("report")
if report is None:
    st.info("Set the parameters in the sidebar and click **Run Experiment**.")
    st.stop()

st.success(f"✅ Completed {report.config.iterations:,} experiments in {report.elapsed_ms} ms")

cols = st.columns(3)
with cols[0]:
    ci = frequency_ci(report.histogram[report.target], report.config.iterations)
    st.metric(f"Heuristic P({report.target})", f"{float(report.heuristic_probability):.6f}")
    st.caption(f"95% CI: [{ci['ci_lower']:.6f}, {ci['ci_upper']:.6f}]")
with cols[1]:
    if report.exact_probability is None:
        st.metric(f"Exact P({report.target})", "unavailable")
    else:
        st.metric(f"Exact P({report.target})", f"{float(report.exact_probability):.6f}")
with cols[2]:
    if report.exact_probability is not None:
        agrees = within_tolerance(
            report.heuristic_probability,
            report.exact_probability,
            report.config.iterations,
        )
        st.metric("Within 3 SE", "Yes" if agrees else "No")

st.plotly_chart(
    build_distribution_figure(report.histogram, st.session_state.exact, report.target),
    use_container_width=True,
)

with st.expander("Frequency table"):
    st.dataframe(report.frequency_table(), use_container_width=True)

"""binomsim - Home page."""

import streamlit as st

st.set_page_config(
    page_title="binomsim",
    page_icon="",
    layout="wide",
)

st.title("binomsim: Simulated vs Exact Binomial Probabilities")

st.markdown("""
## What is binomsim?

**binomsim** repeats a batch of independent Bernoulli trials many times and
compares how often each number of successes occurs with the closed-form
binomial probability

$$P(k) = \\binom{n}{k} p^k (1-p)^{n-k}$$

computed in fixed-precision decimal arithmetic.

### Current capabilities:
- Parallel Monte-Carlo simulation with reproducible seeds
- Exact PMF with a configurable precision policy
- Arbitrary-precision or bounded-integer binomial coefficients
- Standard-error based agreement checks and convergence studies

---

**Use the sidebar** to navigate:
1. **Experiment** - Run a simulation and compare it with the exact PMF
2. **Convergence** - Watch the simulated frequency approach the exact value
""")

if st.session_state.get("report") is not None:
    st.success("Experiment complete! View it on the Experiment page.")

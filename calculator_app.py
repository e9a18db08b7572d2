# calculator_app.py
# Calculator screen (single-file Streamlit app) on top of the calcengine package.
#
# Features:
# - Keypad with optional scientific keys (sin cos tan log sqrt and parentheses)
# - Typed input as an alternative to the keypad
# - Precision setting (2 or 4 decimal places) and scientific-mode switch
# - History of successful calculations, newest first, with clear / reuse
#
# Run locally with: streamlit run calculator_app.py

import streamlit as st

from calcengine import CalculatorSession, configure_logging, load_settings
from calcengine.session import KEYPAD_KEYS, SCIENTIFIC_KEYS

st.set_page_config(page_title="Calculator", layout="centered")

# -------------------------
# Session
# -------------------------
if "calc" not in st.session_state:
    settings = load_settings()
    configure_logging(settings.log_level)
    st.session_state.calc = CalculatorSession(settings=settings)

calc = st.session_state.calc


def _sync_input():
    st.session_state.expr_input = calc.buffer


def _on_key(key):
    calc.press(key)
    _sync_input()


def _on_typed():
    calc.set_buffer(st.session_state.expr_input)


def _on_clear():
    calc.clear()
    _sync_input()


def _on_equals():
    calc.equals()


def _on_scientific():
    calc.scientific_mode = st.session_state.scientific


def _on_reuse_result():
    calc.reuse_last_result()
    _sync_input()


def _on_reuse_expression():
    calc.reuse_last_expression()
    _sync_input()


# -------------------------
# Streamlit UI
# -------------------------
st.title("Calculator")

with st.sidebar:
    st.subheader("Settings")
    st.button(
        f"{calc.precision} decimal places",
        key="precision_toggle",
        on_click=calc.toggle_precision,
        help="Switch between 2 and 4 decimal places",
    )
    st.checkbox("Scientific mode", key="scientific", on_change=_on_scientific)

st.text_input(
    "Expression",
    key="expr_input",
    placeholder="e.g. 2+2, 7/2, sqrt(16)",
    on_change=_on_typed,
)
st.code(calc.display or "0", language=None)

# Keypad, four keys per row
keys = list(KEYPAD_KEYS)
if calc.scientific_mode:
    keys += list(SCIENTIFIC_KEYS)
key_cols = st.columns(4)
for i, key in enumerate(keys):
    key_cols[i % 4].button(key, key=f"key_{key}", on_click=_on_key, args=(key,))

act_eq, act_clear = st.columns(2)
act_eq.button("=", key="equals", type="primary", on_click=_on_equals)
act_clear.button("C", key="clear", on_click=_on_clear)

# History panel
st.markdown("---")
st.button("History", key="history_toggle", on_click=calc.toggle_history)
if calc.history_visible:
    st.subheader("History")
    if calc.ledger:
        for i, (e, r) in enumerate(calc.ledger, start=1):
            st.write(f"**{i}.** `{e}`  =  `{r}`")
    else:
        st.write("No history yet. Evaluate an expression to see it appear here.")

    # History controls
    hcol1, hcol2, hcol3 = st.columns([1, 1, 1])
    hcol1.button("Clear history", key="clear_history", on_click=calc.clear_history)
    if calc.ledger:
        hcol2.button("Copy last result to input", key="reuse_result", on_click=_on_reuse_result)
        hcol3.button("Copy last expression to input", key="reuse_expression", on_click=_on_reuse_expression)

# Reference panel
with st.expander("Reference"):
    st.write(
        "Numbers, `+ - * /`, `%` (modulo), `^` (power) and parentheses. "
        "Functions: `sin`, `cos`, `tan` (radians), `log` (natural), `sqrt`. "
        "Constants: `pi`, `e`."
    )

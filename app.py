"""
Streamlit control panel for VoiceLive.

Run with:  streamlit run app.py

Real-time mode: uses st.rerun() as the clock. Each rerun advances the
detection loop by one tick (pull the latest microphone frame, detect, correct),
displays the result, then reruns the script for the next tick.
"""

import time

import streamlit as st

from voicelive.config import DEFAULT_PRESET, KEY_OFFSETS, NOTE_NAMES, VOCAL_PRESETS
from voicelive.correction import nearest_in_key_frequency
from voicelive.loop import DetectionLoop
from voicelive.microphone import MicrophoneFrameSource
from voicelive.notes import cents_between, to_note
from voicelive.pitch import AutocorrelationDetector
from voicelive.ticker import ManualTicker

st.set_page_config(page_title="VoiceLive", layout="centered")
st.title("VoiceLive")
st.caption("Real-time pitch detection and correction")


@st.cache_resource
def load_crepe():
    from voicelive.crepe import CREPEDetector

    return CREPEDetector()


def remember(frequency, note, shift_ratio):
    st.session_state.last = (frequency, note, shift_ratio)


# --- Session state init ---
if "loop" not in st.session_state:
    st.session_state.loop = DetectionLoop(detector=AutocorrelationDetector(), ticker=ManualTicker())
    st.session_state.loop.apply_preset(DEFAULT_PRESET)
    st.session_state.mic = MicrophoneFrameSource()
    st.session_state.last = (None, None, 1.0)
    st.session_state.preset = DEFAULT_PRESET
    st.session_state.loop.subscribe(remember)

loop = st.session_state.loop

# --- Preset, key, amount and model selection ---
# Widget keys include the preset so picking a preset resets key and amount
preset = st.selectbox("Preset", list(VOCAL_PRESETS), index=list(VOCAL_PRESETS).index(st.session_state.preset))
if preset != st.session_state.preset:
    st.session_state.preset = preset
    loop.apply_preset(preset)

col_key, col_amount, col_model = st.columns(3)
with col_key:
    key = st.selectbox("Key", NOTE_NAMES, index=KEY_OFFSETS.get(loop.state.target_key.root, 0),
                       key=f"key-{preset}")
    loop.set_key(key)
with col_amount:
    amount = st.slider("Correction", 0, 100, int(round(loop.state.amount * 100)), format="%d%%",
                       key=f"amount-{preset}")
    loop.set_amount(amount)
with col_model:
    model_choice = st.selectbox("Detector", ["Autocorrelation", "CREPE (Pre-trained)"])

if model_choice == "Autocorrelation":
    loop.detector = AutocorrelationDetector()
else:
    loop.detector = load_crepe()

st.divider()


# --- Start / Stop toggle ---
def toggle_listening():
    if loop.is_sampling:
        loop.stop()
        st.session_state.mic.close()
        st.session_state.last = (None, None, 1.0)
    else:
        st.session_state.mic.open()
        loop.start(st.session_state.mic)


if loop.is_sampling:
    st.button("Stop Listening", on_click=toggle_listening, type="primary")
else:
    st.button("Start Listening", on_click=toggle_listening, type="primary")

# --- Display results ---
frequency, note, shift_ratio = st.session_state.last

if frequency is not None:
    target = nearest_in_key_frequency(frequency, loop.state.target_key)
    cents = cents_between(frequency, target)

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Detected Note", str(note))
    col2.metric("Frequency", f"{frequency:.1f} Hz")
    col3.metric("Target", f"{to_note(target)} ({cents:+.0f}c)")
    col4.metric("Shift Ratio", f"{shift_ratio:.4f}")

    if abs(cents) < 5:
        st.success("In key!")
    elif cents > 0:
        st.warning(f"Sharp by {cents:.1f} cents")
    else:
        st.warning(f"Flat by {abs(cents):.1f} cents")
elif loop.is_sampling:
    st.info("Listening... sing a note")

# --- Continuous listening loop ---
if loop.is_sampling:
    # Give the microphone time to deliver fresh audio
    time.sleep(0.05)
    loop.ticker.advance()
    st.rerun()

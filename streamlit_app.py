import logging
import os
from datetime import datetime

import streamlit as st

from snowday import GenerationError, SnowDayCalculator

logging.basicConfig(level=logging.INFO)

# Emulates the round trip to a weather backend
SIMULATED_LATENCY = float(os.environ.get("SNOWDAY_SIMULATED_LATENCY", "1.0"))

st.set_page_config(page_title="Snow Day Calculator")

st.title("Snow Day Calculator")
st.write("Find out if you'll have a snow day tomorrow!")

postal_code = st.text_input("Postal Code", placeholder="10001 or M5V 2H1")

if st.button("Calculate Snow Day Probability", type="primary"):
    if not postal_code.strip():
        st.error("Please enter a postal code")
    else:
        calculator = SnowDayCalculator(latency=SIMULATED_LATENCY)
        try:
            with st.spinner("Calculating..."):
                result = calculator.calculate_probability(postal_code)
        except GenerationError as e:
            st.error(str(e))
        else:
            st.markdown("### Snow Day Forecast")
            st.markdown(f"For **{result.location}** - {result.conditions}")

            st.metric("Chance of a Snow Day", f"{result.probability}%")
            st.progress(result.probability)
            st.write(result.message)

            snowfall = f'{result.snowfall:g}" expected' if result.snowfall > 0 else "None expected"
            temp_col, snow_col, wind_col = st.columns(3)
            temp_col.metric("Temperature", f"{result.temperature}°F")
            snow_col.metric("Snowfall", snowfall)
            wind_col.metric("Wind Speed", f"{result.wind_speed} mph")

            st.caption(f"Last updated: {datetime.now().strftime('%Y-%m-%d %I:%M %p')}")

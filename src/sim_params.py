class SimParams:
    # --- Medium Parameters --- #
    DATA_RATE_bps = 6e6  # 6 Mbps

    # --- MAC Layer Parameters --- #
    SLOT_TIME_us = 9

    CW_MIN = 15

    BACKOFF_UNIT_us = 1  # Duration of one contention window unit when drawing backoffs

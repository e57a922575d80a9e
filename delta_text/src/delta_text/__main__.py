from delta_text.entry_points import run

run()

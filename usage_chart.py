import logging
import traceback

from tkinter import messagebox

from usage_digitizer.settings import load_settings
from usage_digitizer.ui_window import UsageDigitizerWindow


def main():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    settings = load_settings()
    try:
        app = UsageDigitizerWindow(settings=settings)
    except Exception as e:
        traceback.print_exc()
        messagebox.showerror("Usage Chart Digitizer failed to start", str(e))
        raise
    app.mainloop()


if __name__ == "__main__":
    main()

"""Launch the closure routing FastAPI server."""

import logging

import uvicorn


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    uvicorn.run("closure_routing.server:app", host="0.0.0.0", port=8000, reload=True)


if __name__ == "__main__":
    main()

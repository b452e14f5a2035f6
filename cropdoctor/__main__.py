"""
Run the CropDoctor API: ``python -m cropdoctor`` or ``cropdoctor``.
"""
import uvicorn

from cropdoctor.core.config import get_settings


def main() -> None:
    s = get_settings()
    uvicorn.run("cropdoctor.main:app", host=s.HOST, port=s.PORT, log_level=s.LOG_LEVEL.lower())


if __name__ == "__main__":
    main()

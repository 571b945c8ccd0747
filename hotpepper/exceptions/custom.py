class ScraperError(Exception):
    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class InvalidRequestError(ScraperError):
    """Job-level input problem: missing keyword, bad page limit, bad cursor."""

    def __init__(self, message: str):
        super().__init__(message, status_code=400)


class JobNotReadyError(ScraperError):
    def __init__(self, job_id: str, status: str):
        self.job_id = job_id
        self.status = status
        super().__init__(f"Job {job_id} is {status}", status_code=409)

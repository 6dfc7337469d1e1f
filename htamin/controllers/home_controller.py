from htamin.utils.http import ok


def health_check():
    return ok({"status": "ok"})

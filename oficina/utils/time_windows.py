from datetime import datetime, date, time, timedelta, timezone
from zoneinfo import ZoneInfo

from oficina.config import LOCAL_TZ_NAME

LOCAL_TZ = ZoneInfo(LOCAL_TZ_NAME)

def hoje_local(tz: ZoneInfo = LOCAL_TZ) -> date:
    """Data de hoje no fuso da oficina (base para vencimentos)."""
    return datetime.now(tz).date()

def local_dates_to_utc_window(dfrom: date, dto: date, tz: ZoneInfo = LOCAL_TZ):
    """
    Recebe datas (locais) e devolve (start_utc, end_utc_exclusive) aware.
    [dfrom 00:00:00 local, dto 24:00:00 local) → UTC
    """
    start_local = datetime.combine(dfrom, time.min).replace(tzinfo=tz)
    end_local_excl = datetime.combine(dto, time.min).replace(tzinfo=tz) + timedelta(days=1)

    return start_local.astimezone(timezone.utc), end_local_excl.astimezone(timezone.utc)

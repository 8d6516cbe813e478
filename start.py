#!/usr/bin/env python3
"""
CTFd User Sync - copies registered CTFd users into a Google Sheet

One-shot job, suitable for cron:
- Lists users through the CTFd REST API
- Extracts name, email and the registration custom fields
- Overwrites the STAGING range of the spreadsheet
- Pings a Discord webhook and exits 1 on any failure
"""
from ctfd_sync.sync import main

if __name__ == "__main__":
    raise SystemExit(main())

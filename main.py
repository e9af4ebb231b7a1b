from agility.main import main

if __name__ == "__main__":
    # Environment: ROOT_SITE, USER_EMAIL, USER_PASSWORD, MAX_PARALLEL_JOBS,
    # CHEVRON_EXPANSION_DELAY. See agility/harvester/config.py for the rest.
    raise SystemExit(main())

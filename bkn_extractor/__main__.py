from bkn_extractor.scripts.bkn_to_json import main

if __name__ == "__main__":
    raise SystemExit(main())

# euvdlookup

An interactive command-line tool and small Python library for querying the
European Union Vulnerability Database (EUVD) API.

## Installation

```
pip install .
```

No third-party packages are needed at run time. To run the tests, install
the `test` extra (`pip install .[test]`) and run `pytest`.

## Command-line use

```
euvdlookup
```

The command takes no options besides `--help`. It prints a banner, then a
menu:

1. Show Latest Vulnerabilities
2. Show Exploited Vulnerabilities
3. Show Critical Vulnerabilities
4. Search by CVE ID (e.g. `CVE-2024-0864`)
5. Search by ENISA ID (e.g. `EUVD-2024-45012`)
6. Search by Advisory ID (e.g. `cisco-sa-ata19x-multi-RDTEqRsy`)
7. Search vulnerabilities by text
8. Run full self-test
9. Exit

Results are printed as two-space indented JSON. When a request fails, the
error is logged and the menu comes back. The menu also ends when input runs
out.

The self-test queries every endpoint in turn. It writes each response it
receives to `test.txt` in the current directory, under a `===== title =====`
heading, and logs whether all the requests succeeded.

Requests share a rate limit of one every six seconds, and each one times out
after ten seconds.

## Library use

```python
from euvdlookup.client import EuvdClient

client = EuvdClient()
for vuln in client.critical_vulnerabilities():
    print(vuln.id, vuln.base_score)

result = client.search("openssl")
print(result.total)
```

`EuvdClient(base_url, timeout, limiter, opener)` offers:

- `latest_vulnerabilities()`, `exploited_vulnerabilities()`,
  `critical_vulnerabilities()`, which return lists of records;
- `vulnerability(cve_id)`, `enisa_vulnerability(enisa_id)`,
  `advisory(advisory_id)` and `search(text)`, which return one record each.
  The argument is URL-encoded into the query string;
- `request(endpoint)`, which returns the raw decoded JSON for any path below
  the base URL.

`RateLimiter(interval, clock, sleep)` lets through one call to `wait()` per
`interval` seconds and returns the time it slept. One limiter can be shared
between clients.

Records are dataclasses from `euvdlookup.models`, such as
`LatestVulnerability`, `VulnerabilityByID`, `ENISAVulnerabilityByID`,
`AdvisoryByID` and `VulnerabilityQueryResponse`. They all derive from
`JsonModel` and offer `from_dict` and `to_dict`, which use the API's JSON
field names (`baseScore`, `enisaIdProduct`, `product_version`, ...). When
decoding, unknown keys are ignored and missing keys keep the field's default.
Keys are matched exactly first and then without regard to case.

Failures are raised as subclasses of `euvdlookup.client.EuvdError`:

- `HttpError` when the request cannot be sent or no response arrives;
- `BadResponseError` when the status is not 200 (it has `status` and `reason`);
- `DecodeError` when the body is not the expected JSON.

`euvdlookup.cli` also provides `banner()`, `format_json(data)`,
`self_test(client, path)` and `main_menu(client, stdin, stdout)` for use from
other code.

## What it does not do

Lookups are only available through the interactive menu: there are no
command-line options for single queries. Results are not cached or stored,
apart from the file the self-test writes.
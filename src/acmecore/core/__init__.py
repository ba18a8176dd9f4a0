"""Identity and integrity primitives shared by ACME server components."""

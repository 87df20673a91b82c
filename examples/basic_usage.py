"""Basic usage examples for S3 Credentials."""

import asyncio
from s3_credentials import CredentialCache
from s3_credentials.credentials import (
    ChainProvider,
    EnvAWSProvider,
    EnvMinioProvider,
    IAMRoleProvider,
    StaticProvider,
)


async def main():
    """Run basic credential resolution examples."""

    print("S3 Credentials Examples")
    print("=" * 50)

    # Example 1: Default chain (settings -> AWS env -> MinIO env -> IAM role)
    print("\n1. Default provider chain:")
    credentials = CredentialCache.from_settings()
    try:
        value = await credentials.get()
        print(value)
    except Exception as e:
        print(f"Could not resolve credentials: {e}")

    # Example 2: Custom chain without instance metadata
    print("\n2. Environment first, then MinIO playground keys:")
    chain = ChainProvider([
        EnvAWSProvider(),
        EnvMinioProvider(),
        StaticProvider("Q3AM3UQ867SPQQA43P2F", "zuf+tfteSlswRu7BJ86wekitnifILbZam1KYY3TG"),
    ])
    credentials = CredentialCache(chain)
    print(await credentials.get())

    # Example 3: Concurrent callers share one refresh
    print("\n3. Concurrent get() calls:")
    values = await asyncio.gather(*(credentials.get() for _ in range(5)))
    print(f"Got {len(values)} values, all equal: {len(set(values)) == 1}")

    # Example 4: Force a refresh
    print("\n4. Force refresh:")
    credentials.expire()
    print(f"Expired: {credentials.is_expired()}")
    await credentials.get()
    print(f"Expired after get(): {credentials.is_expired()}")

    # Example 5: Explicit metadata endpoint (e.g. a local mock of the EC2 service)
    print("\n5. IAM role provider:")
    provider = IAMRoleProvider(endpoint="http://127.0.0.1:1338")
    endpoint, is_ecs_task = provider.resolve_endpoint()
    print(f"Endpoint: {endpoint} (ECS task: {is_ecs_task})")


if __name__ == "__main__":
    asyncio.run(main())

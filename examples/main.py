import logging

from attrhandler import Handler


class Job(Handler):
    fillable = frozenset({'handlers', 'name', 'retries', 'steps'})


def main() -> None:
    job = Job({'name': 'nightly-import', 'owner': 'ignored'})
    job.push_items('download', 'parse', 'store', key='steps')
    job.push_handler(lambda step: print('running', step), 'on_step')

    for step in job.get('steps'):
        job.get_handler('on_step')(step)

    job.filter('steps', lambda step: step != 'parse')
    print(job, job.to_array()['steps'])


if __name__ == '__main__':
    logging.basicConfig(level=logging.DEBUG)
    main()
